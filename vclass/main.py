"""
Main entry point for the VClass virtual classroom manager.
"""

import json
import logging
import sys
import threading
from typing import Any, Dict, Optional, TextIO

from .core.exceptions import ConfigurationError
from .services import CommandDispatcher, ConcurrencyManager, Registry


logger = logging.getLogger(__name__)

DEFAULT_CONFIG: Dict[str, Any] = {
    'log_level': 'WARNING',
    'prompt': '> ',
    'serve': False,
    'rest_host': '127.0.0.1',
    'rest_port': 8000,
    'lock_timeout': None,
}

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def load_config(path: Optional[str] = None, overrides: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Merge defaults, an optional JSON config file and explicit overrides."""
    config = dict(DEFAULT_CONFIG)
    if path:
        try:
            with open(path, 'r') as f:
                file_config = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigurationError(f"Cannot read config file {path}: {e}", "config_unreadable")
        if not isinstance(file_config, dict):
            raise ConfigurationError(f"Config file {path} must contain a JSON object", "config_invalid")
        unknown = set(file_config) - set(DEFAULT_CONFIG)
        if unknown:
            raise ConfigurationError(f"Unknown config keys: {', '.join(sorted(unknown))}", "config_invalid")
        config.update(file_config)
    if overrides:
        config.update({k: v for k, v in overrides.items() if v is not None})
    _validate_config(config)
    return config


def _validate_config(config: Dict[str, Any]) -> None:
    for key in ('log_level', 'prompt', 'rest_host'):
        if not isinstance(config[key], str):
            raise ConfigurationError(f"Config key {key} must be a string", "config_invalid")
    if not isinstance(config['serve'], bool):
        raise ConfigurationError("Config key serve must be true or false", "config_invalid")
    port = config['rest_port']
    if isinstance(port, bool) or not isinstance(port, int) or not 0 < port < 65536:
        raise ConfigurationError("Config key rest_port must be an integer port number", "config_invalid")
    timeout = config['lock_timeout']
    if timeout is not None and (isinstance(timeout, bool) or not isinstance(timeout, (int, float))
                                or timeout <= 0):
        raise ConfigurationError("Config key lock_timeout must be null or a positive number", "config_invalid")


def configure_logging(level: str) -> None:
    """Send log records to stderr so they never mix with command output."""
    numeric_level = logging.getLevelName(str(level).upper())
    if not isinstance(numeric_level, int):
        raise ConfigurationError(f"Invalid log level: {level}", "config_invalid")
    logging.basicConfig(level=numeric_level, format=LOG_FORMAT, stream=sys.stderr)


class ClassroomPlatform:
    """Wires the registry to the interactive shell and the optional REST server."""

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        self._config = dict(DEFAULT_CONFIG)
        self._config.update(config or {})
        self._concurrency_manager = ConcurrencyManager(default_timeout=self._config['lock_timeout'])
        self._registry = Registry(self._concurrency_manager)
        self._dispatcher = CommandDispatcher(self._registry)
        self._rest_thread: Optional[threading.Thread] = None

    @property
    def registry(self) -> Registry:
        return self._registry

    @property
    def dispatcher(self) -> CommandDispatcher:
        return self._dispatcher

    def start_rest_server(self) -> None:
        """Serve the REST API from a daemon thread sharing this registry."""
        if self._rest_thread is not None:
            logger.warning("REST server already running")
            return

        import uvicorn
        from .api.rest_api import ClassroomRestAPI

        rest_api = ClassroomRestAPI(self._registry)
        host = self._config['rest_host']
        port = int(self._config['rest_port'])

        def run_server():
            uvicorn.run(rest_api.app, host=host, port=port, log_level="warning")

        self._rest_thread = threading.Thread(target=run_server, name="vclass-rest", daemon=True)
        self._rest_thread.start()
        logger.info("REST server started on %s:%s", host, port)

    def run_shell(self, stdin: Optional[TextIO] = None, stdout: Optional[TextIO] = None) -> int:
        """Read commands until exit or end of input. Returns the exit code."""
        if stdin is None:
            stdin = sys.stdin
        if stdout is None:
            stdout = sys.stdout
        interactive = stdin.isatty()
        prompt = self._config['prompt']

        print("Welcome to the Virtual Classroom Manager.", file=stdout)
        print("Type 'help' to see available commands.", file=stdout)

        while True:
            if interactive:
                stdout.write(prompt)
                stdout.flush()
            line = stdin.readline()
            if not line:
                if interactive:
                    stdout.write("\n")
                print("Exiting Virtual Classroom Manager.", file=stdout)
                return 0

            result = self._dispatcher.dispatch(line)
            print(result.message, file=stdout)
            if result.terminate:
                return 0


def main(argv=None) -> int:
    """Main entry point."""
    import argparse

    parser = argparse.ArgumentParser(description="Virtual Classroom Manager")
    parser.add_argument("--config", type=str, help="Configuration file path")
    parser.add_argument("--log-level", type=str, help="Logging level (default WARNING)")
    parser.add_argument("--serve", action="store_true", default=None,
                        help="Also serve the REST API while the shell runs")
    parser.add_argument("--rest-host", type=str, help="REST server host")
    parser.add_argument("--rest-port", type=int, help="REST server port")

    args = parser.parse_args(argv)

    try:
        config = load_config(args.config, {
            'log_level': args.log_level,
            'serve': args.serve,
            'rest_host': args.rest_host,
            'rest_port': args.rest_port,
        })
        configure_logging(config['log_level'])
    except ConfigurationError as e:
        print(e.message, file=sys.stderr)
        return 2

    platform = ClassroomPlatform(config)
    if config['serve']:
        platform.start_rest_server()

    try:
        return platform.run_shell()
    except KeyboardInterrupt:
        print("\nExiting Virtual Classroom Manager.")
        return 0


if __name__ == "__main__":
    sys.exit(main())
