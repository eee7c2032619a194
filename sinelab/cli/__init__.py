"""Conversational and argument-driven CLI using Rich and Questionary.

===================================================================================
OVERVIEW
===================================================================================
Entry point: sinelab-cli

  sinelab-cli generate --samples 200 --sequence-length 40 --csv
  sinelab-cli train --input data/exports/sine_dataset_2024-01-01.json --epochs 20
  sinelab-cli architecture --units 64
  sinelab-cli                 (no sub-command → question-and-answer loop)

===================================================================================
SUBMODULE STRUCTURE
===================================================================================

main.py:
    main(argv) → exit code
    argparse sub-commands plus run_conversational_cli(config)
    Ctrl-C during training → TrainingLoopController.request_stop()

commands.py:
    InteractionChannel - Protocol shared with the Streamlit app
    run_generate() → GenerationOutcome (dataset + written paths)
    run_export()   → ExportOutcome
    run_train()    → TrainingArtifacts
    run_architecture() → ASCII diagram

chat.py:
    SineChat - Rich-backed InteractionChannel
      - greet() / say() / success() / hint() / wrap_error()
      - show_stats(stats) → Rich table
      - last_dataset: dataset generated in this session

===================================================================================
"""
