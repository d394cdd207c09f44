# The MIT License (MIT)
# Copyright © 2025 Entrius

"""Console presentation of candidates and outcomes. No decisions are made here."""

from typing import List, Sequence, Tuple

from rich.console import Console
from rich.markup import escape

from dependabot_approve.classes import ApprovalOutcome, DismissalOutcome, PullRequestCandidate
from dependabot_approve.cli.tables import build_candidate_table, build_options_table


class ResultReporter:
    """Renders run output to a Rich console.

    ``quiet`` suppresses the options table and per-outcome lines; the
    candidate listing and prompt messages are always shown.
    """

    def __init__(self, console: Console, quiet: bool = False, show_status: bool = True):
        self.console = console
        self.quiet = quiet
        self.show_status = show_status

    def render_options(self, title: str, rows: List[Tuple[str, str]]) -> None:
        if self.quiet:
            return
        self.console.print(f'\n[bold cyan]{title}[/bold cyan]')
        self.console.print(build_options_table(rows))
        self.console.print()

    def render_warnings(self, warnings: Sequence[str]) -> None:
        for warning in warnings:
            self.console.print(f'[yellow]Warning: {escape(warning)}[/yellow]')

    def render_no_candidates(self) -> None:
        self.console.print('[yellow]No candidates found.[/yellow]')

    def render_candidates(self, candidates: List[PullRequestCandidate]) -> None:
        self.console.print(f'\n[bold cyan]Dependabot PRs found[/bold cyan] [dim]({len(candidates)})[/dim]\n')
        self.console.print(build_candidate_table(candidates, show_status=self.show_status))
        self.console.print()

    def render_prompt_help(self) -> None:
        self.console.print("Enter the PRs to approve as a comma separated list (e.g. 1,3) or 'all' for every entry.")

    def render_selection_error(self, message: str) -> None:
        self.console.print(f'[red]Unable to parse input: {escape(message)}[/red]')

    def render_outcomes(self, outcomes: List[ApprovalOutcome]) -> None:
        if self.quiet:
            return
        for outcome in outcomes:
            title = escape(outcome.candidate.title)
            number = outcome.candidate.number
            if outcome.dry_run:
                self.console.print(f'  [cyan]•[/cyan] Dry run approval for #{number} {title}')
            elif outcome.succeeded:
                self.console.print(f'  [green]✓[/green] Approved #{number} {title}')
            else:
                self.console.print(
                    f'  [red]✗[/red] Failed to approve #{number} {title}: {escape(outcome.failure_detail or "")}'
                )

    def render_summary(self, outcomes: List[ApprovalOutcome]) -> None:
        if self.quiet:
            return
        failed = [o for o in outcomes if not o.succeeded]
        succeeded = len(outcomes) - len(failed)
        if failed:
            numbers = ', '.join(f'#{o.candidate.number}' for o in failed)
            self.console.print(
                f'\n[yellow]{succeeded} of {len(outcomes)} approved; needs manual attention: {numbers}[/yellow]'
            )
        else:
            self.console.print(f'\n[green]{succeeded} of {len(outcomes)} approved[/green]')

    def render_dismissals(self, outcomes: List[DismissalOutcome]) -> None:
        if self.quiet:
            return
        if not outcomes:
            self.console.print('[yellow]No junk reviews found.[/yellow]')
            return
        for outcome in outcomes:
            review = outcome.review
            label = f'review {review.id} by {escape(review.author)} on #{review.pr_number}'
            if outcome.dry_run:
                self.console.print(f'  [cyan]•[/cyan] Dry run dismissal of {label}')
            elif outcome.succeeded:
                self.console.print(f'  [green]✓[/green] Dismissed {label}')
            else:
                self.console.print(
                    f'  [red]✗[/red] Failed to dismiss {label}: {escape(outcome.failure_detail or "")}'
                )
