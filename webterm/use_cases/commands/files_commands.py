"""
Commands for navigating and modifying the virtual filesystem.
"""

import logging
from typing import Optional

from webterm.entities.command import CommandResult
from webterm.entities.entry import Entry, extension_of
from webterm.exceptions import (
    ArgumentError,
    EntryNotFoundError,
    FileRepositoryError,
    NotFoundError,
    ShellError,
)
from webterm.ports.commands.command_handler_port import (
    CommandContext,
    CommandHandlerPort,
    CommandSpec,
)
from webterm.ports.files.file_repository_port import FileRepositoryPort
from webterm.use_cases.commands.common import (
    find_entry,
    format_size,
    format_timestamp,
    index_by_name,
    sort_entries,
    validate_name,
)
from webterm.use_cases.shell.path_resolver import ROOT, PathSignal, join, resolve


class FilesCommandsHandler(CommandHandlerPort):
    """Listing, navigation and entry CRUD commands."""

    def __init__(
        self,
        file_repository: FileRepositoryPort,
        default_extension: str = ".txt",
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._repo = file_repository
        self._default_extension = default_extension
        self._logger = logger or logging.getLogger(__name__)

    def available_commands(self) -> list[CommandSpec]:
        return [
            CommandSpec(
                name="ls",
                aliases=("dir",),
                usage="ls [-l] [-a] [directory]",
                description="List files and directories",
                handler=self._cmd_ls,
                examples=("ls", "ls -l", "ls -a", "ls Documents"),
            ),
            CommandSpec(
                name="cd",
                usage="cd [directory]",
                description="Change the working directory",
                handler=self._cmd_cd,
                max_args=1,
                examples=("cd Documents", "cd ..", "cd /"),
            ),
            CommandSpec(
                name="pwd",
                usage="pwd",
                description="Print the working directory",
                handler=self._cmd_pwd,
                max_args=0,
                asynchronous=False,
            ),
            CommandSpec(
                name="mkdir",
                usage="mkdir <directory>",
                description="Create a directory",
                handler=self._cmd_mkdir,
                min_args=1,
                max_args=1,
                examples=("mkdir projects",),
            ),
            CommandSpec(
                name="touch",
                usage="touch <file>",
                description=f"Create an empty file ({self._default_extension} added when no extension)",
                handler=self._cmd_touch,
                min_args=1,
                max_args=1,
                examples=("touch notes.md", "touch plan"),
            ),
            CommandSpec(
                name="rm",
                usage="rm <name>",
                description="Delete a file or a directory",
                handler=self._cmd_rm,
                min_args=1,
                max_args=1,
                examples=("rm old.txt",),
            ),
            CommandSpec(
                name="rmdir",
                usage="rmdir <directory>",
                description="Delete an empty directory",
                handler=self._cmd_rmdir,
                min_args=1,
                max_args=1,
                examples=("rmdir empty_folder",),
            ),
            CommandSpec(
                name="cp",
                usage="cp <source> <destination>",
                description="Copy a file",
                handler=self._cmd_cp,
                min_args=2,
                max_args=2,
                examples=("cp notes.txt backup.txt", "cp notes.txt Archive"),
            ),
            CommandSpec(
                name="mv",
                usage="mv <source> <destination>",
                description="Move or rename a file",
                handler=self._cmd_mv,
                min_args=2,
                max_args=2,
                examples=("mv draft.txt final.txt", "mv report.txt Documents"),
            ),
            CommandSpec(
                name="rename",
                usage="rename <name> <new-name>",
                description="Rename a file or directory in place",
                handler=self._cmd_rename,
                min_args=2,
                max_args=2,
            ),
            CommandSpec(
                name="find",
                usage="find <text>",
                description="Find entries of the working directory by name",
                handler=self._cmd_find,
                min_args=1,
                max_args=1,
            ),
            CommandSpec(
                name="tree",
                usage="tree",
                description="Show the directory tree below the working directory",
                handler=self._cmd_tree,
                max_args=0,
            ),
            CommandSpec(
                name="du",
                usage="du",
                description="Show file sizes of the working directory",
                handler=self._cmd_du,
                max_args=0,
            ),
            CommandSpec(
                name="stat",
                usage="stat <name>",
                description="Show details about an entry",
                handler=self._cmd_stat,
                min_args=1,
                max_args=1,
            ),
        ]

    # ---------------- navigation ----------------
    async def _cmd_ls(self, args: list[str], ctx: CommandContext) -> CommandResult:
        options = [a for a in args if a.startswith("-") and len(a) > 1]
        targets = [a for a in args if a not in options]
        letters = set("".join(o[1:] for o in options))
        if letters - {"l", "a"} or len(targets) > 1:
            raise ArgumentError("Usage: ls [-l] [-a] [directory]")

        path = ctx.working_path
        if targets:
            resolved = resolve(ctx.working_path, targets[0])
            path = ROOT if resolved is PathSignal.ALREADY_AT_ROOT else resolved

        entries = sort_entries(await self._repo.list_entries(path))
        if "a" not in letters:
            entries = [e for e in entries if not e.is_hidden]
        if not entries:
            return CommandResult.ok(f"{path}: directory is empty")
        if "l" not in letters:
            return CommandResult.ok(*(e.name for e in entries))
        return CommandResult.ok(
            f"total {len(entries)}", *(self._long_format(e, ctx.user) for e in entries)
        )

    def _long_format(self, entry: Entry, user: str) -> str:
        flag = "d" if entry.is_dir else "-"
        modified = entry.modified_at.strftime("%Y-%m-%d %H:%M") if entry.modified_at else "-" * 16
        return f"{flag}rw-r--r-- {user} {entry.size:>10} {modified} {entry.name}"

    async def _cmd_cd(self, args: list[str], ctx: CommandContext) -> CommandResult:
        if not args:
            return CommandResult.ok("Returned to /", working_path=ROOT)
        target = args[0]
        resolved = resolve(ctx.working_path, target)
        if resolved is PathSignal.ALREADY_AT_ROOT:
            return CommandResult.ok("Already at root")
        try:
            await self._repo.list_entries(resolved)
        except EntryNotFoundError:
            return CommandResult.fail(f"cd: no such directory: {target}")
        return CommandResult.ok(f"Changed directory to {resolved}", working_path=resolved)

    def _cmd_pwd(self, args: list[str], ctx: CommandContext) -> CommandResult:
        return CommandResult.ok(ctx.working_path)

    # ---------------- creation / deletion ----------------
    async def _cmd_mkdir(self, args: list[str], ctx: CommandContext) -> CommandResult:
        name = validate_name("mkdir", args[0])
        await self._repo.create_directory(ctx.working_path, name)
        self._logger.info(f"mkdir {join(ctx.working_path, name)}")
        return CommandResult.ok(f"Directory '{name}' created")

    async def _cmd_touch(self, args: list[str], ctx: CommandContext) -> CommandResult:
        name = validate_name("touch", args[0])
        if extension_of(name) is None:
            name = f"{name}{self._default_extension}"
        await self._repo.write_new_file(ctx.working_path, name, "")
        self._logger.info(f"touch {join(ctx.working_path, name)}")
        return CommandResult.ok(f"File '{name}' created")

    async def _cmd_rm(self, args: list[str], ctx: CommandContext) -> CommandResult:
        entry = await find_entry(self._repo, ctx.working_path, args[0])
        await self._repo.delete_entry(join(ctx.working_path, entry.name), is_directory=entry.is_dir)
        kind = "Directory" if entry.is_dir else "File"
        return CommandResult.ok(f"{kind} '{entry.name}' removed")

    async def _cmd_rmdir(self, args: list[str], ctx: CommandContext) -> CommandResult:
        entry = await find_entry(self._repo, ctx.working_path, args[0])
        if not entry.is_dir:
            return CommandResult.fail(f"rmdir: '{entry.name}' is not a directory")
        path = join(ctx.working_path, entry.name)
        if await self._repo.list_entries(path):
            return CommandResult.fail(f"rmdir: directory '{entry.name}' is not empty")
        await self._repo.delete_entry(path, is_directory=True)
        return CommandResult.ok(f"Directory '{entry.name}' removed")

    # ---------------- copy / move ----------------
    async def _copy(self, command: str, src: str, dst: str, ctx: CommandContext) -> tuple[Entry, str]:
        """Copy a file; returns the source entry and the destination path."""
        validate_name(command, dst)
        listing = index_by_name(await self._repo.list_entries(ctx.working_path))
        source = listing.get(src)
        if source is None:
            raise NotFoundError(f"{command}: '{src}' not found in {ctx.working_path}")
        if source.is_dir:
            raise ShellError(f"{command}: '{src}' is a directory")

        content = await self._repo.read_text(join(ctx.working_path, source.name))
        target = listing.get(dst)
        if target is not None and target.is_dir:
            parent, name = join(ctx.working_path, target.name), source.name
        else:
            parent, name = ctx.working_path, dst
        await self._repo.write_new_file(parent, name, content)
        return source, join(parent, name)

    async def _cmd_cp(self, args: list[str], ctx: CommandContext) -> CommandResult:
        source, destination = await self._copy("cp", args[0], args[1], ctx)
        return CommandResult.ok(f"'{source.name}' copied to {destination}")

    async def _cmd_mv(self, args: list[str], ctx: CommandContext) -> CommandResult:
        src, dst = args
        entry = await find_entry(self._repo, ctx.working_path, src)
        if entry.is_dir:
            return await self._move_directory(entry, dst, ctx)
        source, destination = await self._copy("mv", src, dst, ctx)
        await self._repo.delete_entry(join(ctx.working_path, source.name))
        return CommandResult.ok(f"'{source.name}' moved to {destination}")

    async def _move_directory(self, entry: Entry, dst: str, ctx: CommandContext) -> CommandResult:
        validate_name("mv", dst)
        listing = index_by_name(await self._repo.list_entries(ctx.working_path))
        target = listing.get(dst)
        if target is not None:
            if target.is_dir:
                return CommandResult.fail(
                    f"mv: cannot move directory '{entry.name}' into '{dst}'"
                )
            return CommandResult.fail(f"mv: '{dst}' already exists")
        await self._repo.rename_entry(join(ctx.working_path, entry.name), dst, is_directory=True)
        return CommandResult.ok(f"'{entry.name}' moved to {join(ctx.working_path, dst)}")

    async def _cmd_rename(self, args: list[str], ctx: CommandContext) -> CommandResult:
        old, new = args
        validate_name("rename", new)
        entry = await find_entry(self._repo, ctx.working_path, old)
        await self._repo.rename_entry(
            join(ctx.working_path, entry.name), new, is_directory=entry.is_dir
        )
        return CommandResult.ok(f"'{entry.name}' renamed to '{new}'")

    # ---------------- inspection ----------------
    async def _cmd_find(self, args: list[str], ctx: CommandContext) -> CommandResult:
        needle = args[0].lower()
        matches = [
            e
            for e in sort_entries(await self._repo.list_entries(ctx.working_path))
            if needle in e.name.lower()
        ]
        if not matches:
            return CommandResult.ok(f"No entries matching '{args[0]}' in {ctx.working_path}")
        return CommandResult.ok(*(f"./{e.name}{'/' if e.is_dir else ''}" for e in matches))

    async def _cmd_tree(self, args: list[str], ctx: CommandContext) -> CommandResult:
        lines = [ctx.working_path]
        counts = {"dirs": 0, "files": 0}
        entries = sort_entries(await self._repo.list_entries(ctx.working_path))
        await self._walk(ctx.working_path, entries, "", lines, counts)
        lines.append("")
        lines.append(f"{counts['dirs']} directories, {counts['files']} files")
        return CommandResult.ok(*lines)

    async def _walk(
        self,
        path: str,
        entries: list[Entry],
        prefix: str,
        lines: list[str],
        counts: dict[str, int],
    ) -> None:
        for i, entry in enumerate(entries):
            last = i == len(entries) - 1
            lines.append(f"{prefix}{'└── ' if last else '├── '}{entry.name}")
            if not entry.is_dir:
                counts["files"] += 1
                continue
            counts["dirs"] += 1
            child = join(path, entry.name)
            try:
                children = sort_entries(await self._repo.list_entries(child))
            except FileRepositoryError as e:
                self._logger.warning(f"tree: skipping {child}: {e}")
                lines[-1] += " [unreadable]"
                continue
            await self._walk(child, children, prefix + ("    " if last else "│   "), lines, counts)

    async def _cmd_du(self, args: list[str], ctx: CommandContext) -> CommandResult:
        files = [e for e in await self._repo.list_entries(ctx.working_path) if not e.is_dir]
        files.sort(key=lambda e: (-e.size, e.name))
        total = sum(e.size for e in files)
        lines = [f"{e.size:>12}  {e.name}" for e in files]
        if not files:
            lines.append(f"No files in {ctx.working_path}")
        lines.append(f"{total:>12}  total ({format_size(total)})")
        return CommandResult.ok(*lines)

    async def _cmd_stat(self, args: list[str], ctx: CommandContext) -> CommandResult:
        entry = await find_entry(self._repo, ctx.working_path, args[0])
        details = entry.get_details()
        lines = [
            f"  Name: {details['name']}",
            f"  Type: {details['kind']}",
            f"  Size: {details['size']} bytes ({format_size(details['size'])})",
            f"  Path: {join(ctx.working_path, entry.name)}",
            f"Created: {format_timestamp(details['created_at'])}",
            f"Modified: {format_timestamp(details['modified_at'])}",
        ]
        if details["extension"]:
            lines.append(f"Extension: {details['extension']}")
        return CommandResult.ok(*lines)
