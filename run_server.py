import uvicorn
from dotenv import load_dotenv

# Load environment variables from .env
load_dotenv()


if __name__ == "__main__":
    from forecourt.config import Settings
    from forecourt.main import create_app

    settings = Settings.from_env()
    print(f"Server running on port {settings.port}")
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port)
