import uvicorn
from toegrip.config import config

def main():
    # Parse arguments before the app module configures logging from them
    config.setup_from_args()
    from toegrip.main import app

    # Display startup information with available command-line options
    print("\n" + "="*60)
    print("Toe Grip Rehabilitation Game Backend")
    print("="*60)
    print(f"Mode: {config.mode_description}")
    print(f"Session: {config.session_duration_s:.0f}s, history: {config.history_path}")
    print("\nAvailable modes:")
    print("  toegrip --mode debug         # Verbose logging, sessions saved")
    print("  toegrip --mode debug_no_save # Verbose logging, no session history")
    print("  toegrip --mode non_debug     # Minimal logging only")
    print("="*60 + "\n")

    uvicorn.run(app, host=config.host, port=config.port)

if __name__ == "__main__":
    main()
