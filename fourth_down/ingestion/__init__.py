"""
Ingestion layer — form coercion and the decision service client.

Submodules:
  form_coercion    — raw form text → ``GameState`` (NaN for unparseable fields)
  decision_client  — ``GET /v1/recommend`` over httpx → ``Recommendation``

Endpoint placement (.env, gitignored):
  FOURTH_DOWN_API_URL        — decision service origin (default: http://localhost:8008)
"""
