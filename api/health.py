from flask import Blueprint

from models import storage, cache

bp = Blueprint("health", __name__)

@bp.get("/health")
def health():
    """
    Health check: API up, plus reachability of the database and token cache
    ---
    tags:
      - Health
    responses:
      200:
        description: API is up
        schema:
          type: object
          properties:
            status:
              type: string
              example: ok
            version:
              type: string
              example: 1.0.0
            database:
              type: boolean
            cache:
              type: boolean
      503:
        description: Database or cache unreachable
    """
    checks = {"database": storage.ping(), "cache": cache.ping()}
    healthy = all(checks.values())
    body = {"status": "ok" if healthy else "degraded", "version": "1.0.0", **checks}
    return body, 200 if healthy else 503
