# Cadence coaching package
# Modules:
#   db.py        - Supabase / Postgres store handles and config helpers
#   auth.py      - Session management and sign-in helpers
#   models.py    - Row types built from store responses
#   errors.py    - Exception taxonomy raised by the services
#   profiles.py  - Profile lookups and self-edit
#   teams.py     - Invitation lifecycle and teammate resolution (core logic)
#   scoring.py   - Message analysis and profile score aggregation
#   messages.py  - Direct messages between teammates
#   ui.py        - Shared Streamlit widgets and plotly figures
#   logging_config.py - Console logging setup
