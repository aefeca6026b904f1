"""
Dependency injection container for managing application dependencies.
"""

import logging
from typing import Optional

from webterm.adapters.files.http_fs_adapter import HttpFileSystemAdapter
from webterm.adapters.files.local_fs_adapter import LocalFileSystemAdapter
from webterm.config.settings import Settings, settings as default_settings
from webterm.ports.files.file_repository_port import FileRepositoryPort
from webterm.use_cases.commands.files_commands import FilesCommandsHandler
from webterm.use_cases.commands.script_commands import ScriptCommandsHandler
from webterm.use_cases.commands.system_commands import SystemCommandsHandler
from webterm.use_cases.commands.text_commands import TextCommandsHandler
from webterm.use_cases.shell.dispatcher import CommandDispatcher
from webterm.use_cases.shell.path_resolver import ROOT
from webterm.use_cases.shell.script_engine import ScriptEngine
from webterm.use_cases.shell.session import ShellSession
from webterm.use_cases.shell.session_registry import SessionRegistry


class DependencyContainer:
    """
    Container for managing application dependencies using dependency injection.
    """

    def __init__(self, config: Optional[Settings] = None):
        self._settings = config or default_settings
        self._instances = {}
        self._logger = logging.getLogger(__name__)

    @property
    def settings(self) -> Settings:
        return self._settings

    def create_file_repository(self, user: str) -> FileRepositoryPort:
        """
        Create a storage adapter bound to one caller identity.

        Returns:
            FileRepositoryPort implementation for the configured backend
        """
        if self._settings.backend == "local":
            return LocalFileSystemAdapter(self._settings.local_root, user, self._logger)
        return HttpFileSystemAdapter(
            self._settings.api_url,
            user,
            timeout=self._settings.timeout,
            logger=self._logger,
        )

    def create_dispatcher(self, file_repository: FileRepositoryPort) -> CommandDispatcher:
        """
        Build the command dispatch table over a storage adapter.

        Returns:
            Configured CommandDispatcher
        """
        engine = ScriptEngine(
            file_repository, max_depth=self._settings.max_script_depth, logger=self._logger
        )
        return CommandDispatcher(
            FilesCommandsHandler(
                file_repository, self._settings.default_extension, logger=self._logger
            ),
            TextCommandsHandler(file_repository, logger=self._logger),
            SystemCommandsHandler(),
            ScriptCommandsHandler(
                engine, file_repository, self._settings.script_extension, logger=self._logger
            ),
            logger=self._logger,
        )

    def create_session(
        self, user: Optional[str] = None, working_path: str = ROOT
    ) -> ShellSession:
        """
        Create an independent shell session with its own storage adapter.

        Returns:
            A new ShellSession
        """
        user = user or self._settings.user
        repository = self.create_file_repository(user)
        return ShellSession(
            self.create_dispatcher(repository),
            user,
            working_path=working_path,
            history_limit=self._settings.history_limit,
            file_repository=repository,
            logger=self._logger,
        )

    def get_session_registry(self) -> SessionRegistry:
        """
        Get the registry of sessions served over HTTP.
        """
        if "session_registry" not in self._instances:
            self._instances["session_registry"] = SessionRegistry(
                lambda user, path: self.create_session(user, path),
                max_sessions=self._settings.max_sessions,
                logger=self._logger,
            )
        return self._instances["session_registry"]

    def reset(self):
        """Reset all instances (useful for testing)."""
        self._instances.clear()


# Global container instance
container = DependencyContainer()
