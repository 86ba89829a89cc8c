#!/usr/bin/env python3
"""
CLI for delegate-vp.

Examples:
  - Current voting power of a delegate's voters
    delegate-vp power --delegate-address 0x...

  - Voting power at a historical vote, saved as JSON
    delegate-vp power --delegate-address 0x... --vote-id 180 --json

  - List delegated voters only
    delegate-vp voters --delegate-address 0x...

The RPC endpoint comes from --rpc-url, else RPC_URL (environment or .env).
"""

import argparse
import asyncio
import logging
from typing import List, Optional

from delegate_vp.commands.delegated_voters import (
    build_report_payload,
    render_voters,
    render_voting_power,
)
from delegate_vp.contracts.accessor import LidoVotingAccessor
from delegate_vp.shared.constants import GlobalConstants, LidoVotingConstants
from delegate_vp.shared.exceptions import (
    NonRetryableException,
    RetryableException,
)
from delegate_vp.shared.logging import set_log_level
from delegate_vp.shared.services.web3_service import Web3Service
from delegate_vp.shared.validation import (
    validate_delegate_address,
    validate_eth_address,
    validate_positive_int,
    validate_vote_id,
)
from delegate_vp.utils.blockchain import redact_rpc_url
from delegate_vp.utils.formatters import (
    console,
    generate_timestamped_filename,
    save_json_output,
)
from delegate_vp.voters.models import VoteContext
from delegate_vp.voters.service import DelegatedVotersService


def _positive_int(value: str) -> int:
    return validate_positive_int(int(value), "value")


def _vote_id(value: str) -> int:
    return validate_vote_id(int(value))


def _rpc_timeout(value: str) -> float:
    timeout = float(value)
    if not timeout > 0:
        raise argparse.ArgumentTypeError(
            f"must be a positive number of seconds, got {value}"
        )
    return timeout


def _build_service(args: argparse.Namespace) -> DelegatedVotersService:
    concurrency = getattr(args, "concurrency", GlobalConstants.DEFAULT_CONCURRENCY)
    web3_service = Web3Service(args.rpc_url, request_timeout=args.rpc_timeout)
    accessor = LidoVotingAccessor(
        web3_service, args.contract_address, max_workers=concurrency
    )
    return DelegatedVotersService(
        accessor,
        page_size=args.page_size,
        chunk_size=getattr(args, "chunk_size", GlobalConstants.DEFAULT_CHUNK_SIZE),
        concurrency=concurrency,
    )


def _print_connection(args: argparse.Namespace, delegate: str) -> None:
    console.print(f"RPC: {redact_rpc_url(args.rpc_url)}")
    console.print(f"Contract: {args.contract_address}")
    console.print(f"Delegate: {delegate}")


def cmd_power(args: argparse.Namespace) -> None:
    """Fetch and display voting power of a delegate's voters."""

    async def run():
        delegate = validate_delegate_address(args.delegate_address)
        args.contract_address = validate_eth_address(
            args.contract_address, "contract_address"
        )
        context = (
            VoteContext.at_vote(args.vote_id)
            if args.vote_id is not None
            else VoteContext.current()
        )
        service = _build_service(args)

        if not args.quiet:
            _print_connection(args, delegate)
            console.print(f"\nFetching delegated voters, then {context.describe()}...")

        try:
            snapshot = await service.get_voting_power(delegate, context)
        finally:
            service.close()

        if args.json:
            filename = args.output or generate_timestamped_filename(
                "delegate_voting_power"
            )
            save_json_output(
                dict(build_report_payload(snapshot)),
                filename,
                print_path=not args.quiet,
            )
            return

        render_voting_power(snapshot)

    asyncio.run(run())


def cmd_voters(args: argparse.Namespace) -> None:
    """List a delegate's voters."""

    async def run():
        delegate = validate_delegate_address(args.delegate_address)
        args.contract_address = validate_eth_address(
            args.contract_address, "contract_address"
        )
        service = _build_service(args)

        if not args.quiet:
            _print_connection(args, delegate)
            console.print("\nFetching delegated voters...")

        try:
            voters = await service.get_voters(delegate)
        finally:
            service.close()

        if args.json:
            filename = args.output or generate_timestamped_filename(
                "delegated_voters"
            )
            save_json_output(
                {"delegate": delegate, "voters": list(voters)},
                filename,
                print_path=not args.quiet,
            )
            return

        render_voters(delegate, voters)

    asyncio.run(run())


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "-d",
        "--delegate-address",
        type=str,
        default=LidoVotingConstants.DEFAULT_DELEGATE,
        help=f"Delegate address (default: {LidoVotingConstants.DEFAULT_DELEGATE})",
    )
    parser.add_argument(
        "--rpc-url",
        type=str,
        default=GlobalConstants.get_rpc_url(),
        help="Ethereum RPC URL (default: RPC_URL env / .env, else a public node)",
    )
    parser.add_argument(
        "--rpc-timeout",
        type=_rpc_timeout,
        default=None,
        help="RPC request timeout in seconds (default: DVP_RPC_TIMEOUT or 30)",
    )
    parser.add_argument(
        "--contract-address",
        type=str,
        default=LidoVotingConstants.VOTING_CONTRACT,
        help="Lido Voting contract address (Ethereum mainnet)",
    )
    parser.add_argument(
        "--page-size",
        type=_positive_int,
        default=GlobalConstants.DEFAULT_PAGE_SIZE,
        help="Page size for getDelegatedVoters calls",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress progress output (results still printed)",
    )
    parser.add_argument("--json", action="store_true", help="Output JSON")
    parser.add_argument("--output", type=str, help="Output filename")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="delegate-vp",
        description="Fetch delegated voters sorted by voting power",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    # power
    p_power = sub.add_parser(
        "power", help="Voting power of a delegate's voters"
    )
    _add_common_arguments(p_power)
    p_power.add_argument(
        "-v",
        "--vote-id",
        type=_vote_id,
        default=None,
        help="Vote ID to read historical voting power at (default: current)",
    )
    p_power.add_argument(
        "--chunk-size",
        type=_positive_int,
        default=GlobalConstants.DEFAULT_CHUNK_SIZE,
        help="Addresses per voting power call",
    )
    p_power.add_argument(
        "--concurrency",
        type=_positive_int,
        default=GlobalConstants.DEFAULT_CONCURRENCY,
        help="Concurrent voting power calls",
    )
    p_power.set_defaults(func=cmd_power)

    # voters
    p_voters = sub.add_parser("voters", help="List a delegate's voters")
    _add_common_arguments(p_voters)
    p_voters.set_defaults(func=cmd_voters)

    return parser


def main(argv: Optional[List[str]] = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.quiet:
        set_log_level(logging.WARNING)
    try:
        args.func(args)
    except (RetryableException, NonRetryableException) as e:
        console.print(f"[red]Error:[/red] {e.message}")
        raise SystemExit(1) from e
    except Exception as e:
        console.print(f"[red]Error:[/red] {str(e)}")
        raise


if __name__ == "__main__":
    main()
