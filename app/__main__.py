from app.main import create_app
from app.settings import settings

# Serves the latency target: python -m app
if __name__ == "__main__":
    import uvicorn

    # per-request access logs would dominate CPU under load
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port, access_log=False, log_level="warning")
