from flask import Blueprint, current_app

bp = Blueprint("health", __name__)

@bp.get("/health")
def health():
    """
    Liveness plus a round trip to the credential store
    ---
    tags:
      - Health
    responses:
      200:
        description: Service and database are up
        schema:
          type: object
          properties:
            status: { type: string, example: OK }
            database: { type: string, example: ok }
      503:
        description: Database unreachable
    """
    storage = current_app.extensions["credential_service"].storage
    if not storage.ping():
        return {"status": "UNAVAILABLE", "database": "unreachable"}, 503
    return {"status": "OK", "database": "ok"}, 200
