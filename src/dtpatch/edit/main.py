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
Edit properties of a device tree source file in place.

The file is parsed, the assignments are applied and the tree is written back
in canonical formatting (tab indentation, blank line before child nodes).
"""

import sys
from typing import Optional, Tuple
import click

from ..dts.parser import parse_dts
from ..dts.serializer import stringify
from ..models import PatchStatus
from ..patches import apply_patches, parse_assignment
from ..utils import read_text, write_text
from ..exceptions import ParseError, LookupFailedError


@click.command(name='edit')
@click.argument('dts_file', type=click.Path(exists=True, dir_okay=False))
@click.option('--set', 'assignments', multiple=True, required=True,
              help='Assignment as node/path:key=value, or node/path:key for a flag (repeatable)')
@click.option('--output', '-o', help='Output file (default: overwrite input)')
@click.option('--create', is_flag=True, help='Add properties that do not exist yet')
@click.option('--verbose', '-v', is_flag=True, help='Verbose output')
def edit(dts_file: str, assignments: Tuple[str, ...], output: Optional[str],
         create: bool, verbose: bool):
    """
    Set property values in a DTS file.

    Examples:

        dtpatch edit board.dts --set 'sdhci@3440000:status="okay"' -o patched.dts

        dtpatch edit board.dts --create --set 'chosen:linux,initrd-start=<0x00>'
    """
    try:
        try:
            patches = [parse_assignment(a) for a in assignments]
        except ValueError as e:
            click.echo(f"Error: {e}", err=True)
            sys.exit(2)

        root = parse_dts(read_text(dts_file))
        results = apply_patches(root, patches, create=create)

        if verbose:
            for result in results:
                click.echo(f"{result.patch.location}: {result.status.value}")

        output_path = output or dts_file
        write_text(output_path, stringify(root))

        changed = sum(1 for r in results if r.status is PatchStatus.APPLIED)
        click.echo(f"✓ Updated {changed} propert{'y' if changed == 1 else 'ies'} in {output_path}")

    except ParseError as e:
        click.echo(f"Parse error: {e}", err=True)
        sys.exit(4)
    except LookupFailedError as e:
        click.echo(f"Lookup error: {e}", err=True)
        sys.exit(5)
    except OSError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(3)
