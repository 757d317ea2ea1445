# Copyright 2025 Multikernel Technologies, Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""
Patch the device tree of the selected boot entry.

Workflow:
  1. Read extlinux.conf and select the DEFAULT (or --label) entry
  2. Back up the entry's DTB and decompile it with dtc
  3. Parse the source and apply property patches
  4. Write <name>_new.dts and compile it to <name>_new.dtb
  5. Verify the new blob and append a boot entry that uses it
"""

import sys
from typing import List, Optional, Tuple
import click

from ..compiler import DeviceTreeCompiler, DEFAULT_DTC
from ..dts.parser import parse_dts
from ..dts.serializer import stringify
from ..extlinux import ExtlinuxConfig, make_patched_entry, DEFAULT_EXTLINUX_PATH, DEFAULT_PREFIX
from ..models import PatchStatus, PatchResult, PropertyPatch
from ..patches import DEFAULT_PATCHES, apply_patches, parse_assignment
from ..utils import backup_file, derive_patch_paths, read_text, write_text
from ..exceptions import (
    ParseError, LookupFailedError, BootConfigError, CompilerError
)


def build_patch_list(assignments: Tuple[str, ...], use_defaults: bool) -> List[PropertyPatch]:
    """Combine the built-in patches with --set assignments."""
    patches = list(DEFAULT_PATCHES) if use_defaults else []
    patches.extend(parse_assignment(a) for a in assignments)
    return patches


def report_results(results: List[PatchResult], verbose: bool) -> None:
    for result in results:
        location = result.patch.location
        if result.status is PatchStatus.SKIPPED:
            click.echo(f"Skipped {location}: node not present")
        elif verbose and result.status is PatchStatus.APPLIED:
            click.echo(f"  {location}: {result.previous} -> {result.patch.value}")
        elif verbose:
            click.echo(f"  {location}: already {result.patch.value}")


@click.command(name='patch')
@click.option('--extlinux', 'extlinux_path', default=DEFAULT_EXTLINUX_PATH,
              show_default=True, help='extlinux configuration file')
@click.option('--label', '-l', help='Boot entry to patch (default: DEFAULT entry)')
@click.option('--dtc', default=DEFAULT_DTC, show_default=True, help='dtc executable')
@click.option('--prefix', default=DEFAULT_PREFIX, show_default=True,
              help='Prefix for the new boot entry label')
@click.option('--set', 'assignments', multiple=True,
              help='Extra patch as node/path:key=value (repeatable)')
@click.option('--no-defaults', is_flag=True, help='Do not apply the built-in patches')
@click.option('--dry-run', is_flag=True, help='Write patched DTS only, do not compile or add a boot entry')
@click.option('--verbose', '-v', is_flag=True, help='Verbose output')
@click.pass_context
def patch(
    ctx: click.Context,
    extlinux_path: str,
    label: Optional[str],
    dtc: str,
    prefix: str,
    assignments: Tuple[str, ...],
    no_defaults: bool,
    dry_run: bool,
    verbose: bool
):
    """
    Patch the device tree used by a boot entry and add a boot entry for it.

    Examples:

        # Apply the built-in microSD and camera patches to the DEFAULT entry
        dtpatch patch

        # Only change one property, without touching boot configuration
        dtpatch patch --no-defaults --set 'serial@3100000:status="okay"' --dry-run
    """
    debug = (ctx.obj or {}).get("debug", False)

    try:
        try:
            patches = build_patch_list(assignments, not no_defaults)
        except ValueError as e:
            click.echo(f"Error: {e}", err=True)
            sys.exit(2)

        if not patches:
            click.echo("Error: No patches to apply (use --set or drop --no-defaults)", err=True)
            sys.exit(2)

        extlinux = ExtlinuxConfig(extlinux_path)
        entry = extlinux.select_entry(label)
        if entry.fdt is None:
            raise BootConfigError(f"Boot entry '{entry.label}' has no FDT line")

        new_label = prefix + entry.label
        if not dry_run and extlinux.load().find_entry(new_label) is not None:
            raise BootConfigError(
                f"Boot entry '{new_label}' already exists in {extlinux.path}, "
                f"remove it or use --prefix"
            )
        paths = derive_patch_paths(entry.fdt)

        if verbose:
            click.echo(f"Boot entry: {entry.label} ({entry.fdt})")

        compiler = DeviceTreeCompiler(dtc)

        backup_file(paths.dtb, paths.backup)
        click.echo(f"✓ Backed up {paths.dtb} to {paths.backup}")

        compiler.decompile(paths.dtb, paths.dts)
        click.echo(f"✓ Decompiled to {paths.dts}")

        root = parse_dts(read_text(paths.dts))
        results = apply_patches(root, patches)
        report_results(results, verbose)

        applied = [r for r in results if r.status is PatchStatus.APPLIED]
        if not applied:
            click.echo("Device tree seems to be already patched, nothing to do")
            return
        click.echo(f"✓ Applied {len(applied)} patch(es)")

        write_text(paths.new_dts, stringify(root))
        click.echo(f"Generated: {paths.new_dts}")

        if dry_run:
            click.echo("✓ Dry run complete (no DTB compiled, boot menu unchanged)")
            return

        compiler.compile(paths.new_dts, paths.new_dtb)
        size = compiler.verify_blob(paths.new_dtb)
        click.echo(f"Generated: {paths.new_dtb} ({size} bytes)")

        new_entry = make_patched_entry(entry, paths.new_dtb, prefix)
        extlinux.append_entry(new_entry)
        click.echo(f"✓ Added boot entry '{new_entry.label}' to {extlinux.path}")

        click.echo("✓ Patch finished successfully")

    except ParseError as e:
        click.echo(f"Parse error: {e}", err=True)
        sys.exit(4)
    except LookupFailedError as e:
        click.echo(f"Lookup error: {e}", err=True)
        sys.exit(5)
    except CompilerError as e:
        click.echo(f"dtc error: {e}", err=True)
        sys.exit(6)
    except BootConfigError as e:
        click.echo(f"Boot configuration error: {e}", err=True)
        sys.exit(1)
    except OSError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(3)
    except Exception as e:
        click.echo(f"Unexpected error: {e}", err=True)
        if verbose or debug:
            import traceback
            traceback.print_exc()
        sys.exit(1)
