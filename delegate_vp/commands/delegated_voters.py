from typing import Optional, Sequence

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from delegate_vp.shared.constants import LidoVotingConstants
from delegate_vp.voters.models import (
    Address,
    DelegateReportDict,
    DelegateVotingPower,
    VoterPowerDict,
)
from delegate_vp.utils.formatters import console as default_console
from delegate_vp.utils.formatters import format_units, format_units_human

DECIMALS = LidoVotingConstants.TOKEN_DECIMALS
SYMBOL = LidoVotingConstants.TOKEN_SYMBOL


def report_title(snapshot: DelegateVotingPower) -> str:
    if not snapshot.context.is_historical:
        return "Current voting power"
    return f"Voting power at vote #{snapshot.context.vote_id}"


def build_report_payload(snapshot: DelegateVotingPower) -> DelegateReportDict:
    """JSON-serialisable report; powers stay exact as decimal strings."""
    active = [
        VoterPowerDict(
            rank=rank,
            address=address,
            voting_power=str(power),
            voting_power_formatted=format_units(power, DECIMALS),
        )
        for rank, (address, power) in enumerate(snapshot.active(), start=1)
    ]
    total = snapshot.total_power
    return DelegateReportDict(
        delegate=snapshot.delegate,
        vote_id=snapshot.context.vote_id,
        voters_count=len(snapshot.voters),
        active_voters=active,
        inactive_addresses=snapshot.inactive(),
        total_voting_power=str(total),
        total_voting_power_formatted=format_units(total, DECIMALS),
    )


def render_voting_power(
    snapshot: DelegateVotingPower, console: Optional[Console] = None
) -> None:
    """Print active voters ranked by power, the inactive count and totals."""
    console = console or default_console
    active = snapshot.active()
    inactive = snapshot.inactive()
    total = snapshot.total_power

    table = Table(
        title=f"Active voters ({len(active)} addresses)",
        show_header=True,
        header_style="bold cyan",
    )
    table.add_column("#", justify="right", style="dim")
    table.add_column("Address", justify="left", style="green")
    table.add_column(f"Voting power ({SYMBOL})", justify="right", style="magenta")

    for rank, (address, power) in enumerate(active, start=1):
        table.add_row(str(rank), address, format_units_human(power, DECIMALS))

    console.print(
        Panel(
            table if active else "[dim]No address holds voting power[/dim]",
            title=f"[bold blue]{report_title(snapshot)}",
            subtitle=f"Delegate {snapshot.delegate}",
        )
    )

    if inactive:
        console.print(
            f"[dim]Inactive: {len(inactive)} addresses with 0 {SYMBOL}[/dim]"
        )

    console.print(
        f"[bold]Total voting power:[/bold] "
        f"{format_units_human(total, DECIMALS)} {SYMBOL}"
    )
    console.print(f"Full precision:     {format_units(total, DECIMALS)} {SYMBOL}")


def render_voters(
    delegate: Address,
    voters: Sequence[Address],
    console: Optional[Console] = None,
) -> None:
    """Print the delegate's voters in contract order."""
    console = console or default_console

    table = Table(
        title=f"Delegated voters of {delegate}",
        show_header=True,
        header_style="bold cyan",
    )
    table.add_column("#", justify="right", style="dim")
    table.add_column("Voter", justify="left", style="green")
    for index, voter in enumerate(voters, start=1):
        table.add_row(str(index), voter)

    console.print(table)
    console.print(f"Total: {len(voters)} delegated voters")
