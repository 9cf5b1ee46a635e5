import argparse
import sys

from tcpchat.client import run_terminal
from tcpchat.config import ChatConfig
from tcpchat.errors import BindFailure
from tcpchat.logger import setup_logging
from tcpchat.server import ChatServer
from tcpchat.utils import md5_hex


def build_parser():
    parser = argparse.ArgumentParser(description="Run the chat server or client.")
    parser.add_argument("--mode", choices=["client", "server", "settings", "digest"], required=True,
                        help="Specify mode: client, server, settings editor or MD5 digest")
    parser.add_argument("--ip", type=str, help="Server address (defaults to the config value)")
    parser.add_argument("--port", type=int, help="Port number (defaults to the config value)")
    parser.add_argument("--max-connections", type=int,
                        help="Maximum concurrent users, server only (defaults to the config value)")
    parser.add_argument("--name", type=str, help="Display name, client only")
    parser.add_argument("--text", type=str, help="Text to hash, digest mode only")
    parser.add_argument("--config", default="chat_config.json", help="Path of the JSON settings file")
    parser.add_argument("--log-file", help="Server log file (defaults to the config value)")
    return parser


def main(argv=None):
    """Parses command-line arguments and runs the selected mode.

    Returns:
        int: Process exit status.
    """
    args = build_parser().parse_args(argv)

    if args.mode == "digest":
        if args.text is None:
            print("Error: --text is required for digest mode.")
            return 1
        print(md5_hex(args.text))
        return 0

    if args.mode == "settings":
        from tcpchat import settings
        return settings.main(args.config)

    config = ChatConfig(args.config)
    host = args.ip or config.get("host")
    port = args.port if args.port is not None else config.get("port")

    if args.mode == "server":
        setup_logging(args.log_file or config.get("log_file"))
        server = ChatServer(host=host, port=port, max_connections=args.max_connections, config=config)
        try:
            server.start()
        except BindFailure:
            return 1
        except KeyboardInterrupt:
            print("\nShutting down server...")
        finally:
            server.stop()
        return 0

    setup_logging()
    name = args.name
    while not name or not name.strip():
        name = input("Welcome, type your name to start: ")
    try:
        run_terminal(host, port, name)
    except OSError as e:
        print(f"Error connecting to {host}:{port}: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
