import importlib
import inspect
import os
import pkgutil
from argparse import ArgumentParser, _SubParsersAction
from types import ModuleType

from kudoskit.utils.command.base_command import BaseCommand
from kudoskit.utils.logging.logging_manager import LogManager

from .error import (
    CommandLoadError,
    CommandManagerError,
    HierarchyConflictError,
    ModuleImportError,
)


class CommandManager:
    """Discovers ``BaseCommand`` subclasses under a domains package and builds the CLI parser."""

    _logger = LogManager.get_instance().get_logger("CommandManager")

    def __init__(self, base_path: str, base_package: str = "kudoskit.domains"):
        self.base_path = os.path.abspath(base_path)
        self.base_package = base_package
        self.hierarchy: dict[str, dict] = {}

    def load_commands(self) -> None:
        """Dynamically loads all command modules and builds the hierarchy."""
        self._logger.debug(f"Starting to load commands from base path: {self.base_path}")

        for root, _, _ in os.walk(self.base_path):
            if not os.path.isfile(os.path.join(root, "__init__.py")):
                self._logger.debug(f"Skipping non-package directory: {root}")
                continue

            for _, module_name, is_package in pkgutil.iter_modules([root]):
                if is_package or not module_name.endswith("_command"):
                    continue
                try:
                    self._logger.debug(f"Processing module: {module_name} in {root}")
                    module = self._import_module(root, module_name)
                    self._process_module(module)
                except CommandManagerError as e:
                    self._logger.error(str(e), exc_info=True)

        self._logger.debug("Finished loading commands.")

    def _module_path_from_root(self, root: str, module_name: str) -> str:
        """Constructs the relative module path for importlib.import_module.

        Args:
            root (str): Current directory being processed.
            module_name (str): Name of the module.

        Returns:
            str: Relative module path for importlib.
        """
        relative_path = os.path.relpath(root, self.base_path)
        if relative_path == ".":
            return f".{module_name}"
        package_path = relative_path.replace(os.sep, ".")
        return f".{package_path}.{module_name}"

    def _import_module(self, root: str, module_name: str) -> ModuleType:
        """Imports a module dynamically."""
        relative_path = self._module_path_from_root(root, module_name)
        self._logger.debug(f"Importing module {relative_path}")
        try:
            return importlib.import_module(relative_path, package=self.base_package)
        except Exception as e:
            raise ModuleImportError(module_path=relative_path, error=e) from e

    def _process_module(self, module: ModuleType) -> None:
        """Finds command classes defined in a module and adds them to the hierarchy."""
        self._logger.debug(f"Inspecting module: {module.__name__}")
        try:
            for name, obj in inspect.getmembers(module, inspect.isclass):
                if not issubclass(obj, BaseCommand) or obj is BaseCommand or obj.__module__ != module.__name__:
                    continue
                if inspect.isabstract(obj):
                    self._logger.debug(f"Command {name} is abstract and will be skipped.")
                    continue
                self._logger.debug(f"Found command class: {name}")
                self._add_to_hierarchy(obj)
        except CommandManagerError:
            raise
        except Exception as e:
            raise CommandLoadError(module_name=module.__name__, error=e) from e

    def _add_to_hierarchy(self, entity: type[BaseCommand]) -> None:
        """Adds a command class to the hierarchy based on its domain package."""
        relative_module = entity.__module__[len(self.base_package) + 1 :]
        name_parts = relative_module.split(".")
        command_name = entity.get_name()

        current_level = self.hierarchy
        for part in name_parts[:-1]:
            current_level = current_level.setdefault(part, {})

        if command_name in current_level:
            raise HierarchyConflictError(command_name=command_name)

        current_level[command_name] = {
            "name": command_name,
            "description": entity.get_description(),
            "help": entity.get_help(),
            "class": entity,
        }
        self._logger.debug(f"Command {command_name} added successfully.")

    def build_parser(self) -> ArgumentParser:
        """Builds the ArgumentParser hierarchy from the loaded command structure."""
        self._logger.debug("Building argument parser hierarchy")
        parser = ArgumentParser(
            prog="kudoskit",
            description="kudoskit CLI - turn work activity into recognition",
        )
        subparsers = parser.add_subparsers(dest="domain", help="Available domains")

        for domain_name, substructure in self.hierarchy.items():
            self._add_subparser(subparsers, domain_name, substructure)

        return parser

    def _add_subparser(self, subparsers: _SubParsersAction, name: str, substructure: dict) -> None:
        """Recursively adds subparsers for domains and commands."""
        if "class" not in substructure:
            parser = subparsers.add_parser(name, help=f"{name} commands")
            parser_subparsers = parser.add_subparsers(dest="subdomain_or_command", help=f"{name} subcommands")
            for key, value in substructure.items():
                self._add_subparser(parser_subparsers, key, value)
        else:
            self._logger.debug(f"Registering command: {substructure['name']}")
            substructure["class"].register_command(subparsers)
