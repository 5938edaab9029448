import sys
from pathlib import Path

# Ensure we can import the app
current_dir = Path(__file__).parent
sys.path.insert(0, str(current_dir))

def main():
    from bottleneck_diagnostic.config import settings

    print(f"🚀 Starting {settings.DIAGNOSTIC_TITLE}...")
    print(f"🌐 Server: http://localhost:{settings.PORT}")
    print(f"📖 API Docs: http://localhost:{settings.PORT}/docs")
    print("=" * 50)

    try:
        import uvicorn
        from bottleneck_diagnostic.main import app

        uvicorn.run(
            app,
            host=settings.HOST,
            port=settings.PORT,
            reload=False,
            log_level=settings.LOG_LEVEL.lower()
        )

    except ImportError as e:
        print(f"❌ Import error: {e}")
        print("Make sure you've installed the project: pip install -e .")
        sys.exit(1)
    except Exception as e:
        print(f"❌ Error: {e}")
        sys.exit(1)

if __name__ == "__main__":
    main()
