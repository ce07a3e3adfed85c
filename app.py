"""
Hugging Face Spaces entry point: exposes the Legal Compass API as `app`.

Spaces serves on port 7860; elsewhere use `python cli.py serve`.
"""

from legal_compass.server.main import app

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=7860)
