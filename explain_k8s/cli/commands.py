"""Command line interface for the explanation generator."""
import logging
import sys
from typing import Optional

import click
from colorama import Fore, Style, init

from explain_k8s import __version__
from explain_k8s.cli.resource_selector import ResourceSelector
from explain_k8s.config import AppConfig
from explain_k8s.errors import ConfigurationError
from explain_k8s.exporter.json_exporter import JsonExporter
from explain_k8s.introspection.enrichment import FailurePolicy
from explain_k8s.introspection.explainer import KubectlExplainer
from explain_k8s.parser.resource_names import load_resource_names
from explain_k8s.schema.models import ExplainReport, ExplanationNode

# Initialize colorama
init(autoreset=True)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
DESCRIPTION_PREVIEW = 60


def print_banner():
    """Print application banner."""
    click.echo(f"{Fore.CYAN}{'=' * 44}")
    click.echo(f"{Fore.CYAN}║   {Fore.WHITE}Explain K8s Generator{Fore.CYAN}                ║")
    click.echo(f"{Fore.CYAN}║   {Fore.WHITE}kubectl explain -> JSON schema tree{Fore.CYAN}  ║")
    click.echo(f"{Fore.CYAN}{'=' * 44}{Style.RESET_ALL}")
    click.echo()


def set_verbosity(verbose: bool):
    """Switch the root logger between INFO and WARNING."""
    logging.getLogger().setLevel(logging.INFO if verbose else logging.WARNING)


def print_summary(report: ExplainReport):
    """Print what was explained and what failed."""
    total_fields = sum(e.count_fields() for e in report.explanations)

    click.echo(f"\n{Fore.CYAN}{'━' * 45}")
    click.echo(f"{Fore.GREEN}✅ Explained {len(report.explanations)} resource(s), {total_fields} field(s)")
    click.echo(f"{Fore.CYAN}   Elapsed: {report.elapsed_seconds:.1f}s")

    if report.failed_resources:
        click.echo(f"\n{Fore.RED}❌ Failed resources ({len(report.failed_resources)}):")
        for name, error in sorted(report.failed_resources.items()):
            click.echo(f"{Fore.RED}   • {name}: {error}")

    if report.field_warnings:
        click.echo(f"\n{Fore.YELLOW}⚠️  Fields without description ({len(report.field_warnings)}):")
        for warning in report.field_warnings[:20]:
            click.echo(f"{Fore.YELLOW}   • {warning.full_name}")
        if len(report.field_warnings) > 20:
            click.echo(f"{Fore.YELLOW}   ... +{len(report.field_warnings) - 20} more")
    click.echo(f"{Fore.CYAN}{'━' * 45}{Style.RESET_ALL}")


def print_tree(node: ExplanationNode, max_depth: Optional[int] = None, prefix: str = "", depth: int = 0):
    """Print a node's children as an indented tree."""
    if depth == 0:
        click.echo(f"{Fore.CYAN}📍 {node.name} ({node.kind})")
        if node.description:
            click.echo(f"   {_preview(node.description)}")

    if max_depth is not None and depth >= max_depth:
        return

    for i, child in enumerate(node.children):
        last = i == len(node.children) - 1
        branch = "└─ " if last else "├─ "
        line = f"{prefix}{branch}{child.name}: {Fore.GREEN}{child.kind}{Style.RESET_ALL}"
        if child.description:
            line += f"  {_preview(child.description)}"
        click.echo(line)
        if not child.is_leaf:
            print_tree(child, max_depth, prefix + ("   " if last else "│  "), depth + 1)


def _preview(text: str) -> str:
    if len(text) <= DESCRIPTION_PREVIEW:
        return text
    return text[:DESCRIPTION_PREVIEW - 3] + "..."


@click.group()
@click.version_option(version=__version__)
def cli():
    """Explain K8s Generator - Turn kubectl explain output into JSON trees."""
    logging.basicConfig(level=logging.WARNING, format=LOG_FORMAT)


@cli.command()
@click.option("--resources", "-r", type=click.Path(), default=None, help="File with one resource name per line")
@click.option("--output", "-o", type=click.Path(), default=None, help="JSON file to write")
@click.option("--report", type=click.Path(), default=None, help="Also write the failure report to this file")
@click.option("--max-workers", type=click.IntRange(min=1), default=None, help="Maximum concurrent kubectl queries")
@click.option("--timeout", type=click.FloatRange(min=0, min_open=True), default=None, help="Seconds per kubectl query")
@click.option("--context", default=None, help="kubectl context to pin every query to")
@click.option("--strict", is_flag=True, help="Abort a resource when any field query fails")
@click.option("--select", is_flag=True, help="Pick resources interactively")
@click.option("--verbose/--quiet", default=None, help="Log progress (defaults to VERBOSE_MODE)")
def generate(resources, output, report, max_workers, timeout, context, strict, select, verbose):
    """Explain every listed resource and save the tree as JSON."""
    config = AppConfig.from_env()
    set_verbosity(config.verbose_mode if verbose is None else verbose)
    print_banner()

    resources_file = resources or config.resource_names_file
    output_file = output or config.output_file
    if max_workers is not None:
        config.explainer.max_workers = max_workers
    if timeout is not None:
        config.explainer.query_timeout = timeout
    if context:
        config.explainer.context = context
    if strict:
        config.explainer.failure_policy = FailurePolicy.STRICT

    try:
        names = load_resource_names(resources_file)
    except ConfigurationError as e:
        click.echo(f"{Fore.RED}Error: {e}")
        sys.exit(1)

    if select:
        names = ResourceSelector(names).prompt_selection()
        if not names:
            click.echo(f"{Fore.YELLOW}Nothing to explain. Exiting.")
            return

    click.echo(f"{Fore.CYAN}Explaining {len(names)} resource(s) with up to "
               f"{config.explainer.max_workers} concurrent queries...")
    if not config.explainer.context:
        click.echo(f"{Fore.YELLOW}Do NOT change kubectl contexts during this process.")

    explainer = KubectlExplainer.from_config(config.explainer)
    result = explainer.run(names)

    exporter = JsonExporter()
    saved = exporter.export(output_file, result.explanations)
    if report:
        exporter.export_report(report, result)

    print_summary(result)

    if not result.explanations:
        click.echo(f"{Fore.RED}No resource could be explained")
        sys.exit(1)

    click.echo(f'{Fore.GREEN}SUCCESS: JSON result saved to "{saved}".')


@cli.command()
@click.argument("resource")
@click.option("--depth", type=click.IntRange(min=0), default=None, help="Levels of fields to print")
@click.option("--context", default=None, help="kubectl context to query")
def show(resource, depth, context):
    """Explain a single resource and print its field tree."""
    config = AppConfig.from_env()
    set_verbosity(False)
    if context:
        config.explainer.context = context

    explainer = KubectlExplainer.from_config(config.explainer)
    try:
        result = explainer.run([resource])
    except ConfigurationError as e:
        click.echo(f"{Fore.RED}Error: {e}")
        sys.exit(1)

    explanation = result.get_explanation(resource.strip())
    if explanation is None:
        error = result.failed_resources.get(resource.strip(), "unknown error")
        click.echo(f"{Fore.RED}❌ Could not explain {resource}: {error}")
        sys.exit(1)

    print_tree(explanation, depth)

    for warning in result.field_warnings:
        click.echo(f"{Fore.YELLOW}⚠️  {warning.full_name}: description unavailable")
