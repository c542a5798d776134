"""
Main entrypoint: subscribe to the event publisher and print/log decoded events.

Mode and filters come from the command line; without --mode the operator is
prompted. One subscription per run. SIGINT/SIGTERM cancel the subscription
between frames; the stream, channel and log files are closed before exit.

Exit codes: 0 stream ended or operator exit (Ctrl-C, end of input), 1
configuration or transport failure, 2 invalid subscription parameters.

Env: THOR_SERVER_ADDRESS, THOR_AUTH_TOKEN, THOR_USE_TLS, THOR_LOG_DIRECTORY,
THOR_CONFIG_PATH, LOG_LEVEL, LOG_FORMAT (see thorstream/config/env.py).
"""

from __future__ import annotations

import argparse
import asyncio
import signal
import sys
from collections.abc import Callable

from thorstream.config.env import mask_token
from thorstream.config.settings import ClientSettings, get_settings
from thorstream.core.exceptions import ConfigError, ValidationError
from thorstream.sink import EventSink
from thorstream.stream_listener import (
    StreamSubscriber,
    SubscriptionMode,
    SubscriptionRequest,
    select_subscription,
)
from thorstream.stream_listener.filter import TransactionFilter
from thorstream.stream_listener.listener import END_TRANSPORT_ERROR, SubscriptionStats
from thorstream.stream_listener.transport import GrpcEventTransport
from thorstream.stream_logging import get_logger

logger = get_logger("main")

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_INVALID_SUBSCRIPTION = 2

MAX_PROMPT_WALLETS = 10

_MENU = (
    ("1", SubscriptionMode.ALL_TRANSACTIONS, "All transactions"),
    ("2", SubscriptionMode.SLOT_STATUS, "Slot status"),
    ("3", SubscriptionMode.WALLET_TRANSACTIONS, "Wallet transactions"),
    ("4", SubscriptionMode.ACCOUNT_UPDATES, "Account updates"),
)


def _split_csv(raw: str) -> list[str]:
    return [part.strip() for part in raw.split(",") if part.strip()]


def prompt_request(read: Callable[[str], str] = input) -> SubscriptionRequest | None:
    """Ask for mode and filters on the terminal; None when the operator exits."""
    print("\nSelect subscription type:")
    for key, _, label in _MENU:
        print(f"{key}. {label}")
    print("5. Exit")
    while True:
        choice = read("Enter your choice: ").strip()
        if choice == "5":
            return None
        mode = next((m for key, m, _ in _MENU if key == choice), None)
        if mode is not None:
            break
        print("Invalid choice. Please try again.")

    if mode is SubscriptionMode.WALLET_TRANSACTIONS:
        print(f"Enter up to {MAX_PROMPT_WALLETS} wallet addresses (one per line).")
        wallets: list[str] = []
        for i in range(MAX_PROMPT_WALLETS):
            wallet = read(f"Wallet {i + 1} (or blank to finish): ").strip()
            if not wallet:
                break
            wallets.append(wallet)
        return SubscriptionRequest(mode=mode, wallets=tuple(wallets))
    if mode is SubscriptionMode.ACCOUNT_UPDATES:
        accounts = _split_csv(read("Account addresses (comma-separated, blank for none): "))
        owners = _split_csv(read("Owner addresses (comma-separated, blank for none): "))
        return SubscriptionRequest(mode=mode, accounts=tuple(accounts), owners=tuple(owners))
    return SubscriptionRequest(mode=mode)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Subscribe to the Thor event stream and print decoded events.")
    parser.add_argument("--config", default=None, help="JSON config file (default: THOR_CONFIG_PATH or ./config.json)")
    parser.add_argument("--mode", choices=[m.value for m in SubscriptionMode], help="Subscription mode; prompts when omitted.")
    parser.add_argument("--wallet", action="append", default=[], help="Wallet address (repeatable; wallet mode).")
    parser.add_argument("--account", action="append", default=[], help="Account address (repeatable; accounts mode).")
    parser.add_argument("--owner", action="append", default=[], help="Owner address (repeatable; accounts mode).")
    parser.add_argument("--output", choices=["text", "json"], default="text", help="Presentation format on stdout.")
    parser.add_argument("--detailed", action="store_true", help="Include status metadata in transaction output.")
    return parser


def _install_signal_handlers(loop: asyncio.AbstractEventLoop, task: asyncio.Task) -> None:
    def _handle_sig(name: str) -> None:
        logger.info("main_shutdown_signal", signal=name)
        task.cancel()

    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, _handle_sig, sig.name)
        except (NotImplementedError, RuntimeError):
            # Not supported on this platform / not the main thread
            pass


async def run_session(
    settings: ClientSettings,
    request: SubscriptionRequest,
    *,
    output_format: str = "text",
    detailed: bool = False,
) -> SubscriptionStats:
    """One subscription: transport + sink + subscriber, all closed on the way out."""
    sink = EventSink.from_paths(
        settings.signature_log_path(),
        settings.account_log_path(),
        output_format=output_format,
        detailed=detailed,
    )
    transaction_filter = TransactionFilter(
        settings.program_filters,
        include_vote=settings.include_vote,
        include_failed=settings.include_failed,
    )
    try:
        async with GrpcEventTransport.from_settings(settings) as transport:
            subscriber = StreamSubscriber(
                transport,
                sink,
                transaction_filter=None if transaction_filter.accepts_all else transaction_filter,
                max_consecutive_mismatches=settings.max_consecutive_mismatches,
            )
            task = asyncio.ensure_future(subscriber.run(request))
            _install_signal_handlers(asyncio.get_running_loop(), task)
            return await task
    finally:
        sink.close()


def _interrupted(stage: str) -> int:
    print("\nExiting...")
    logger.info("main_interrupted", stage=stage)
    return EXIT_OK


def main(argv: list[str] | None = None, read: Callable[[str], str] = input) -> int:
    args = build_parser().parse_args(argv)

    try:
        settings = get_settings(args.config)
    except ConfigError as e:
        logger.error("main_config_error", error=str(e))
        return EXIT_FAILURE
    except KeyboardInterrupt:
        return _interrupted("config")

    if args.mode:
        request = SubscriptionRequest(
            mode=SubscriptionMode(args.mode),
            wallets=tuple(args.wallet),
            accounts=tuple(args.account),
            owners=tuple(args.owner),
        )
    else:
        try:
            request = prompt_request(read)
        except (KeyboardInterrupt, EOFError):
            return _interrupted("prompt")
        if request is None:
            print("Exiting...")
            return EXIT_OK

    try:
        select_subscription(request)
    except ValidationError as e:
        logger.error("main_invalid_subscription", mode=request.mode.value, error=str(e))
        return EXIT_INVALID_SUBSCRIPTION

    logger.info(
        "main_session_starting",
        server_address=settings.server_address,
        auth_token=mask_token(settings.auth_token),
        mode=request.mode.value,
        log_directory=str(settings.log_dir()),
    )
    try:
        stats = asyncio.run(
            run_session(
                settings,
                request,
                output_format=args.output,
                detailed=args.detailed or request.mode is SubscriptionMode.WALLET_TRANSACTIONS,
            )
        )
    except KeyboardInterrupt:
        # SIGINT before the loop's handlers were installed
        return _interrupted("session")
    return EXIT_FAILURE if stats.end_reason == END_TRANSPORT_ERROR else EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
