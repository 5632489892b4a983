"""riskcheck_server — FastAPI REST API for the risk assessment questionnaire.

Serves two audiences:
  - respondents: start a session, answer questions one at a time, read the
    final report
  - editors: load, edit, reorder and reset the question pool

The server is a thin shell over ``riskcheck_rulesets`` (engine, editor)
and ``riskcheck_db`` (question pool persistence).
"""
