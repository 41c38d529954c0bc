"""Interactive resource selection."""
from typing import List, Optional

import click
import questionary
from colorama import Fore


class ResourceSelector:
    """Interactive selection of resources to explain."""

    def __init__(self, resource_names: List[str]):
        """Initialize selector."""
        self.resource_names = resource_names
        self.selected: List[str] = []

    def prompt_selection(self) -> List[str]:
        """
        Prompt user to pick resources with a checkbox list.

        Returns:
            List[str]: Selected names, in file order
        """
        if not self.resource_names:
            click.echo(f"{Fore.YELLOW}No resources to select from")
            return []

        answer: Optional[List[str]] = questionary.checkbox(
            "Select resources to explain:",
            choices=[questionary.Choice(name, checked=True) for name in self.resource_names],
        ).ask()

        # None when the prompt was cancelled (Ctrl-C)
        chosen = set(answer or [])
        self.selected = [name for name in self.resource_names if name in chosen]
        self._display_selection()
        return self.selected

    def _display_selection(self):
        """Display selected resources."""
        if not self.selected:
            click.echo(f"{Fore.YELLOW}No resources selected")
            return

        click.echo(f"\n{Fore.GREEN}✅ Selected {len(self.selected)} resource(s):")
        for name in self.selected:
            click.echo(f"{Fore.GREEN}   • {name}")
        click.echo()
