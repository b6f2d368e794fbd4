#!/usr/bin/env python3
import sys
import argparse
import logging

from .access_control import AccessControlProvider, UserAccessControl
from .backends import get_issue_backend
from .config import ConfigManager
from .date_utils import parse_datetime, format_issue_date
from .exceptions import MetadataError
from .fedora import FedoraClient
from .issues import get_issues, get_issues_by_date, get_issues_without_dates, get_pages
from .messages import MessageQueue
from . import mods
from . import relationships

logger = logging.getLogger('newspaper_cli')


class NewspaperMetadataCLI:
    """Command-line interface for newspaper issue metadata"""

    def __init__(self, config, access_control=None, fedora_client=None, solr_client=None):
        self.config = config
        self.access_control = access_control or AccessControlProvider()
        self.fedora = fedora_client or FedoraClient(config)
        self.solr_client = solr_client
        self.messages = MessageQueue()

    def _backend(self):
        return get_issue_backend(self.config, fedora_client=self.fedora, solr_client=self.solr_client,
                                 access_control=self.access_control, messages=self.messages)

    def _print_messages(self):
        for message in self.messages.get_messages():
            print(f"[{message['level']}] {message['text']}", file=sys.stderr)

    def list_issues(self, newspaper_id):
        """List the issues of a newspaper"""
        issues = get_issues(newspaper_id, self._backend())
        self._print_messages()

        if not issues:
            print(f"No issues found for {newspaper_id}")
            return

        print(f"{'PID':<30} {'Seq':<6} {'Issued':<12} {'Label':<40}")
        print("-" * 90)

        for issue in issues.values():
            print(f"{issue.identifier:<30} {str(issue.sequence):<6} {format_issue_date(issue.issued):<12} {issue.label[:40]:<40}")

    def show_calendar(self, newspaper_id):
        """Show the issues of a newspaper grouped by year, month and day"""
        grouped = get_issues_by_date(newspaper_id, self._backend())
        self._print_messages()

        if not grouped:
            print(f"No issues found for {newspaper_id}")
            return

        for year in sorted(grouped):
            print(year)
            for month in sorted(grouped[year]):
                print(f"  {month}")
                for day in sorted(grouped[year][month]):
                    labels = ", ".join(issue.label or issue.identifier for issue in grouped[year][month][day])
                    print(f"    {day}: {labels}")

    def list_missing_dates(self):
        """List issues that have no issue date"""
        issues = get_issues_without_dates(self._backend())
        self._print_messages()

        if not issues:
            print("All issues have an issue date")
            return

        for issue in issues.values():
            print(f"{issue.identifier:<30} {issue.label[:50]}")

    def list_pages(self, issue_id):
        """List the pages of an issue"""
        pages = get_pages(issue_id, self.fedora, self.access_control)

        if not pages:
            print(f"No pages found for {issue_id}")
            return

        print(f"{'PID':<30} {'Seq':<6} {'Page':<6} {'Label':<40}")
        print("-" * 84)

        for page in pages.values():
            print(f"{page.identifier:<30} {str(page.sequence):<6} {page.page or '':<6} {page.label[:40]:<40}")

    def get_date(self, pid, from_mods=False):
        """Print the issue date of an issue"""
        issue = self.fedora.get_object(pid)
        if from_mods:
            issued = mods.read_date(issue.datastream(self.config.mods_datastream_id))
            if issued is None:
                print(f"No issue date in {self.config.mods_datastream_id} of {pid}")
                return False
        else:
            issued = relationships.get_date_issued(issue)

        print(format_issue_date(issued))
        return True

    def set_date(self, pid, date_string, in_mods=False):
        """Set the issue date of an issue"""
        issued = parse_datetime(date_string)
        if issued is None:
            logger.error(f"Invalid date: {date_string}")
            return False

        issue = self.fedora.get_object(pid)
        if in_mods:
            if not mods.write_date(issue.datastream(self.config.mods_datastream_id), issued):
                logger.error(f"Failed to update {self.config.mods_datastream_id} of {pid}")
                return False
        else:
            relationships.set_date_issued(issue, issued)

        logger.info(f"Issue date of {pid} set to {format_issue_date(issued)}")
        return True


def main(argv=None):
    parser = argparse.ArgumentParser(description='Newspaper issue metadata tools')
    subparsers = parser.add_subparsers(dest='command', help='Command to execute')

    # List issues command
    issues_parser = subparsers.add_parser('issues', help='List the issues of a newspaper')
    issues_parser.add_argument('pid', help='Newspaper PID')
    issues_parser.add_argument('--calendar', action='store_true', help='Group issues by date')

    # Missing dates command
    subparsers.add_parser('missing-dates', help='List issues without an issue date')

    # List pages command
    pages_parser = subparsers.add_parser('pages', help='List the pages of an issue')
    pages_parser.add_argument('pid', help='Issue PID')

    # Get date command
    get_date_parser = subparsers.add_parser('get-date', help='Show the issue date of an issue')
    get_date_parser.add_argument('pid', help='Issue PID')
    get_date_parser.add_argument('--from-mods', action='store_true', help='Read the date from MODS')

    # Set date command
    set_date_parser = subparsers.add_parser('set-date', help='Set the issue date of an issue')
    set_date_parser.add_argument('pid', help='Issue PID')
    set_date_parser.add_argument('date', help='Issue date (YYYY-MM-DD)')
    set_date_parser.add_argument('--mods', action='store_true', help='Write the date to MODS')

    # Common arguments
    parser.add_argument('--config', help='Path to a JSON configuration file')
    parser.add_argument('--solr', action='store_true', help='List issues from the search index')
    parser.add_argument('--user', help='Restrict listings to objects this user may view')
    parser.add_argument('--role', action='append', default=[], help='Role of --user (repeatable)')
    parser.add_argument('--verbose', action='store_true', help='Enable debug logging')

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.StreamHandler(sys.stderr)
        ]
    )

    if not args.command:
        parser.print_help()
        return 1

    config_manager = ConfigManager(args.config)
    config = config_manager.config
    if args.solr:
        config.use_solr_for_issues = True

    errors = config.validate()
    if errors:
        for error in errors:
            logger.error(error)
        return 1

    access_control = UserAccessControl(args.user, args.role) if args.user else None
    cli = NewspaperMetadataCLI(config, access_control)

    # Execute command
    try:
        if args.command == 'issues':
            if args.calendar:
                cli.show_calendar(args.pid)
            else:
                cli.list_issues(args.pid)

        elif args.command == 'missing-dates':
            cli.list_missing_dates()

        elif args.command == 'pages':
            cli.list_pages(args.pid)

        elif args.command == 'get-date':
            return 0 if cli.get_date(args.pid, args.from_mods) else 1

        elif args.command == 'set-date':
            return 0 if cli.set_date(args.pid, args.date, args.mods) else 1

    except MetadataError as e:
        logger.error(e.message)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
