"""
Crossword Game Server - Main Entry Point

This is the main entry point for the crossword game server.
It loads the puzzles, initializes the game service and starts the
Flask-SocketIO application.
"""

import threading
import time
from crossword import create_app
from crossword.config import Config, validate_scoring_settings
from crossword.services.game_service import initialize_game_service, get_game_service
from crossword.services.puzzle_loader import load_puzzles, get_puzzle_statistics
from crossword.utils.game_logger import game_logger


def listener_stats_worker(interval):
    """
    Background worker that periodically logs how many connections are
    blocked on each kind of listener.
    """
    while True:
        time.sleep(interval)
        try:
            game_service = get_game_service()
            if game_service:
                stats = game_service.get_listener_stats()
                game_logger.logger.info(
                    f"Listener stats: watch={stats['watch']} wait={stats['wait']} play={stats['play']}"
                )
        except Exception as e:
            game_logger.logger.error(f"Error in listener stats worker: {e}")


def main():
    """Main function to initialize services and start the server."""
    try:
        print("Initializing services...")
        validate_scoring_settings()

        # Load puzzles
        puzzles = load_puzzles(Config.PUZZLE_DIR)
        if puzzles:
            print(f"✓ Loaded {len(puzzles)} puzzle(s) from {Config.PUZZLE_DIR}")
            for stats in get_puzzle_statistics(puzzles):
                print(f"    {stats['name']}: {stats['entries']} entries")
        else:
            print(f"✗ No valid puzzles found in {Config.PUZZLE_DIR}")

        # Initialize game service
        game_service = initialize_game_service(puzzles)
        if game_service:
            print("✓ Game service initialized successfully")
        else:
            print("✗ Failed to initialize game service")

        # Create Flask app
        print("Creating Flask application...")
        app, socketio = create_app(Config)
        print("✓ Flask application created successfully")

        if Config.LISTENER_STATS_INTERVAL_SECONDS > 0:
            stats_thread = threading.Thread(
                target=listener_stats_worker, args=(Config.LISTENER_STATS_INTERVAL_SECONDS,), daemon=True
            )
            stats_thread.start()
            print(f"✓ Listener stats logged every {Config.LISTENER_STATS_INTERVAL_SECONDS} seconds")

        game_logger.logger.info(f"Crossword Server Starting with {len(puzzles)} puzzle(s)")

        print(f"\nStarting Crossword Game Server on {Config.HOST}:{Config.PORT}")
        print(f"Debug mode: {Config.DEBUG}")
        print("=" * 50)

        # Start the server
        socketio.run(app, host=Config.HOST, port=Config.PORT, debug=Config.DEBUG,
                     allow_unsafe_werkzeug=True)

    except KeyboardInterrupt:
        print("\nServer shutting down...")
        game_logger.logger.info("Crossword Server shutting down (KeyboardInterrupt)")
    except Exception as e:
        print(f"Error starting server: {e}")
        game_logger.logger.error(f"Error starting server: {e}")
        raise


if __name__ == '__main__':
    main()
