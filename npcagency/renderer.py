"""Rich terminal renderer for pipeline outcomes, NPC dialogue and persuasion."""

from __future__ import annotations

import io
import sys

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from npcagency.actions.types import ActionResult
from npcagency.dialogue.types import DialogueIntent, DialogueResponse, PersuasionResult
from npcagency.pipeline.coordinator import PipelineOutcome


def _make_console() -> Console:
    """Create a Rich Console that works on Windows (force UTF-8)."""
    if sys.platform == "win32" and hasattr(sys.stdout, "buffer"):
        utf8_stdout = io.TextIOWrapper(sys.stdout.buffer, encoding="utf-8", errors="replace")
        return Console(file=utf8_stdout, force_terminal=True)
    return Console()


# Intent colors for dialogue panels
INTENT_STYLES = {
    DialogueIntent.FRIENDLY: "green",
    DialogueIntent.HOSTILE: "red",
    DialogueIntent.THREATENING: "bold red",
    DialogueIntent.BARGAINING: "yellow",
    DialogueIntent.INFORMATIVE: "cyan",
}


class Renderer:
    """Prints tick summaries and dialogue replies."""

    def __init__(self, console: Console | None = None):
        self.console = console or _make_console()

    def build_tick_table(self, tick: int, outcomes: list[PipelineOutcome]) -> Table:
        table = Table(title=f"Tick {tick}", show_lines=False)
        table.add_column("Agent", style="bold")
        table.add_column("Location")
        table.add_column("Reasoning", overflow="fold")
        table.add_column("Actions")
        table.add_column("Status")

        for outcome in outcomes:
            location = outcome.perception.location if outcome.perception else "-"
            reasoning = outcome.decision.reasoning if outcome.decision else "-"
            actions = "\n".join(
                f"[{'green' if r.success else 'red'}]{r.message}[/]" for r in outcome.results
            )
            table.add_row(
                outcome.agent_id,
                location,
                reasoning,
                actions or "[dim]none[/]",
                self._status(outcome),
            )
        return table

    def render_tick(self, tick: int, outcomes: list[PipelineOutcome]) -> None:
        self.console.print(self.build_tick_table(tick, outcomes))

    def render_dialogue(self, npc_name: str, player_message: str, reply: DialogueResponse) -> None:
        style = INTENT_STYLES.get(reply.intent, "white")
        self.console.print(f"[bold]You:[/] {player_message}")
        self.console.print(
            Panel(
                reply.text or "...",
                title=f"{npc_name} ({reply.emotion})",
                border_style=style,
            )
        )
        if reply.should_end_conversation:
            self.console.print("[dim]The conversation is over.[/]")

    def render_persuasion(
        self,
        npc_name: str,
        request: str,
        result: PersuasionResult,
        outcome: ActionResult | None = None,
    ) -> None:
        if result.agreed:
            verdict, style = "agreed", "green"
        elif result.negotiating:
            verdict, style = "negotiating", "yellow"
        else:
            verdict, style = "refused", "red"
        self.console.print(f"[bold]You:[/] {request}")
        self.console.print(
            Panel(result.npc_reply or "...", title=f"{npc_name} ({verdict})", border_style=style)
        )
        if result.reasoning:
            self.console.print(f"[dim]Reasoning: {result.reasoning}[/]")
        if outcome is not None:
            color = "green" if outcome.success else "red"
            self.console.print(f"[{color}]{outcome.message}[/]")

    @staticmethod
    def _status(outcome: PipelineOutcome) -> str:
        if outcome.cancelled:
            return "[yellow]cancelled[/]"
        if outcome.error is not None:
            return f"[red]error: {outcome.error}[/]"
        if outcome.failed_results:
            return f"[yellow]{len(outcome.failed_results)} failed[/]"
        return "[green]ok[/]"
