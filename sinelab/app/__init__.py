"""Application UI layer: Streamlit front end.

Launch with ``sinelab --gui`` (or ``streamlit run sinelab/app/ui.py``).

Submodules:
  - ui.py: generation form, sample viewer, downloads, and a training panel
    that runs TrainingLoopController on a background thread with a Stop
    button wired to ``request_stop()``.

The command handlers behind it live in sinelab/cli/commands.py.
"""
