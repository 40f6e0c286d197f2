"""
Job Portal API - Server Entry Point.

Usage: python main.py [--host HOST] [--port PORT] [--reload]
"""

import argparse

from dotenv import load_dotenv

load_dotenv()

import uvicorn  # noqa: E402


def main():
    """Serve the API with uvicorn."""
    parser = argparse.ArgumentParser(description="Run the Job Portal API")
    parser.add_argument("--host", default="127.0.0.1")
    parser.add_argument("--port", type=int, default=4000)
    parser.add_argument("--reload", action="store_true", help="Reload on code changes")
    args = parser.parse_args()

    print(f"Job Portal API running on http://{args.host}:{args.port}")
    print(f"API docs: http://{args.host}:{args.port}/docs")
    uvicorn.run("jobportal.api.app:app", host=args.host, port=args.port, reload=args.reload)


if __name__ == "__main__":
    main()
