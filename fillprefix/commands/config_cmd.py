"""
ConfigCommand — Show and set configuration
"""

from ..commands.base import BaseCommand
from ..presentation.symbols import safe_print
from ..presentation.template import OutputTemplate


class ConfigCommand(BaseCommand):
    """Configuration display and modification."""

    def show_config(self):
        """Show current configuration."""
        template = OutputTemplate(symbols=self.symbols)
        template.header("FILLPREFIX CONFIG", "Current Configuration")
        template.section("SETTINGS", self.config_manager.display())
        safe_print(template.render())

    def set_config(self, key: str, value: str, scope: str = "project"):
        """Set a configuration value."""
        symbols = self.symbols
        error = self.config_manager.set(key, value, scope)

        template = OutputTemplate(symbols=symbols)

        if error:
            template.header("FILLPREFIX CONFIG", "Error")
            template.section("ERROR", error)
        else:
            template.header("FILLPREFIX CONFIG", "Configuration Updated")
            template.section("SETTING", f"Set {key} = {value}")
            if scope == "project":
                template.section("SAVED TO", str(self.config_manager.project_config_path))
            else:
                template.section("SAVED TO", str(self.config_manager.user_config_path))
            template.footer(f"{symbols.check_pass} Configuration saved")

        safe_print(template.render())


COMMAND_NAME = 'config'


def register_parser(subparsers):
    """Register config command parser."""
    p = subparsers.add_parser('config', help='View or set configuration')
    p.add_argument('--set', metavar='KEY=VALUE',
                   help='Set config value (e.g., catalog.global_functions=html-bullet,no-citations)')
    p.add_argument('--user', action='store_true',
                   help='Apply to user config instead of project')
    return p


def handle(cli, args):
    """Handle config command dispatch."""
    command = ConfigCommand(cli)
    if args.set:
        if '=' not in args.set:
            print("Error: Use format KEY=VALUE (e.g., display.symbols=ascii)")
        else:
            key, value = args.set.split('=', 1)
            scope = "user" if args.user else "project"
            command.set_config(key, value, scope)
    else:
        command.show_config()
