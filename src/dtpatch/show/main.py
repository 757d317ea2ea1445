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
Show a node or property of a device tree source file.
"""

import sys
from typing import Optional
import click

from ..dts.parser import parse_dts
from ..dts.serializer import stringify, format_property
from ..patches import split_path, require_node, require_property
from ..utils import read_text
from ..exceptions import ParseError, LookupFailedError


@click.command(name='show')
@click.argument('dts_file', type=click.Path(exists=True, dir_okay=False))
@click.option('--path', '-p', 'node_path', default='/', show_default=True,
              help='Node path below the root, e.g. cam_i2cmux/i2c@0')
@click.option('--property', '-k', 'key', help='Show only this property')
@click.option('--children', is_flag=True, help='List child node names only')
def show(dts_file: str, node_path: str, key: Optional[str], children: bool):
    """
    Show a node subtree, its children or a single property.

    Examples:

        dtpatch show board.dts --path sdhci@3440000 --property status
    """
    try:
        root = parse_dts(read_text(dts_file))
        path = split_path(node_path)
        node = require_node(root, path)

        if key:
            click.echo(format_property(require_property(node, key, path)))
        elif children:
            for child in node.children:
                click.echo(child.name)
        else:
            click.echo(stringify(node, 0), nl=False)

    except ParseError as e:
        click.echo(f"Parse error: {e}", err=True)
        sys.exit(4)
    except LookupFailedError as e:
        click.echo(f"Lookup error: {e}", err=True)
        sys.exit(5)
    except OSError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(3)
