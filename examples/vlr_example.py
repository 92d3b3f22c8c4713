#!/usr/bin/env python3
"""
VLR Walkthrough for lazvlr

This example builds the records a COPC writer emits, writes them to an
in-memory file, then reads them back the way a file reader does:
- Building payloads (compression, extra bytes, WKT, COPC info)
- Projecting each payload to its VLR header
- Cataloging records by walking headers only
- Dispatching payload decoding through the registry
- A hierarchy page stored as an EVLR
- Error handling for damaged records

Run with: python examples/vlr_example.py
"""

import io

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.rule import Rule
from rich.table import Table

from lazvlr import (
    CopcInfoVlr,
    EbDataType,
    EbField,
    EbOptions,
    EbVlr,
    EvlrHeader,
    HierarchyEntry,
    HierarchyPage,
    LazVlr,
    MisalignedPayloadError,
    TruncatedInputError,
    VlrCatalog,
    VlrHeader,
    VlrIndexEntry,
    VoxelKey,
    WktVlr,
    default_registry,
)
from lazvlr.vlrs import ItemType

console = Console()

WKT = 'PROJCS["SIRGAS 2000 / UTM zone 23S",GEOGCS["SIRGAS 2000"],UNIT["metre",1]]'


def print_header(title: str, subtitle: str = ""):
    if subtitle:
        full_title = f"[bold blue]{title}[/bold blue]\n[dim]{subtitle}[/dim]"
    else:
        full_title = f"[bold blue]{title}[/bold blue]"

    console.print(Panel(full_title, style="bright_blue", box=box.DOUBLE, padding=(1, 2)))


def print_step(step_num: int, title: str, description: str = ""):
    step_text = f"[bold yellow]Step {step_num}: {title}[/bold yellow]"
    if description:
        step_text += f"\n[dim italic]{description}[/dim italic]"
    console.print(step_text)
    console.print()


def print_success(message: str):
    console.print(f"[bold green]✓[/bold green] {message}")


def print_warning(message: str):
    console.print(f"[bold yellow]⚠[/bold yellow] {message}")


def build_payloads():
    print_step(1, "Building Payloads",
               "Each payload kind knows its identity and encoded size")

    laz = LazVlr.from_format(7, eb_count=2)
    eb = EbVlr()
    eb.add_field(EbField(name="hag", data_type=EbDataType.SHORT,
                         options=EbOptions.SCALE, scale=(0.01, 0.0, 0.0),
                         description="height above ground"))
    wkt = WktVlr(WKT)
    info = CopcInfoVlr(center_x=333000.0, center_y=7394000.0, center_z=760.0,
                       halfsize=256.0, spacing=2.0,
                       gpstime_minimum=1.0e8, gpstime_maximum=1.1e8)

    table = Table(title="Compression Items", box=box.ROUNDED)
    table.add_column("Type", style="cyan")
    table.add_column("Size", style="green", justify="right")
    table.add_column("Version", style="magenta", justify="right")
    for item in laz.items:
        table.add_row(ItemType(item.type).name, str(item.size), str(item.version))
    console.print(table)
    console.print()

    return [laz, eb, wkt, info]


def show_headers(payloads):
    print_step(2, "Projecting Headers",
               "data_length always equals the payload's size()")

    table = Table(title="VLR Headers", box=box.ROUNDED)
    table.add_column("Kind", style="cyan")
    table.add_column("User ID", style="green")
    table.add_column("Record ID", style="magenta", justify="right")
    table.add_column("Data Length", style="yellow", justify="right")
    table.add_column("Description", style="white")

    for vlr in payloads:
        header = vlr.header()
        table.add_row(type(vlr).__name__, header.user_id, str(header.record_id),
                      str(header.data_length), header.description)

    console.print(table)
    console.print()


def write_file(payloads, page):
    stream = io.BytesIO()
    for vlr in payloads:
        vlr.header().write(stream)
        vlr.write(stream)

    # Hierarchy page as the single EVLR
    evlr_offset = stream.tell()
    EvlrHeader("copc", 1000, page.size(), "EPT hierarchy").write(stream)
    page.write(stream)
    return stream, evlr_offset


def catalog_and_decode(stream, count, evlr_offset):
    print_step(3, "Cataloging and Decoding",
               "Headers are walked first; payloads are decoded on demand")

    stream.seek(0)
    catalog = VlrCatalog()
    for _ in range(count):
        offset = stream.tell()
        header = VlrHeader.read(stream)
        catalog.add(VlrIndexEntry.from_header(header, offset))
        stream.seek(header.data_length, io.SEEK_CUR)

    stream.seek(evlr_offset)
    catalog.add(VlrIndexEntry.from_header(EvlrHeader.read(stream), evlr_offset))

    registry = default_registry()
    table = Table(title="Decoded Records", box=box.SIMPLE)
    table.add_column("Offset", style="cyan", justify="right")
    table.add_column("Record", style="green")
    table.add_column("Decoded", style="white")

    for entry in catalog:
        stream.seek(entry.byte_offset)
        if entry.extended:
            header = EvlrHeader.read(stream)
        else:
            header = VlrHeader.read(stream)
        payload = registry.decode(header, stream)
        table.add_row(str(entry.byte_offset), f"{entry.user_id}/{entry.record_id}", repr(payload))

    console.print(table)
    print_success(f"Cataloged and decoded {len(catalog)} records")
    console.print()


def demonstrate_errors():
    print_step(4, "Error Handling",
               "Damaged records fail loudly instead of desynchronizing the stream")

    try:
        EbVlr.read(io.BytesIO(b"\0" * 385), 385)
    except MisalignedPayloadError as e:
        print_warning(f"Caught expected error: {e}")

    try:
        CopcInfoVlr.deserialize(b"\0" * 100)
    except TruncatedInputError as e:
        print_warning(f"Caught expected error: {e}")

    broken = LazVlr.from_format(1)
    broken.compressor = 17
    console.print(f"Unknown compressor reported by valid(): {broken.valid()}")
    console.print()


def main():
    print_header("lazvlr - Record Walkthrough",
                 "Headers, payloads, catalog and registry")
    console.print()

    payloads = build_payloads()
    console.print(Rule("[bold blue]Headers[/bold blue]"))
    show_headers(payloads)

    root = VoxelKey(0, 0, 0, 0)
    page = HierarchyPage.from_entries([
        HierarchyEntry(root, 4096, 1500, 20000),
        HierarchyEntry(root.child(0), 5596, 700, 9000),
        HierarchyEntry(root.child(3), 0, 0, 0),
    ])

    stream, evlr_offset = write_file(payloads, page)
    console.print(Rule("[bold blue]Reading Back[/bold blue]"))
    catalog_and_decode(stream, len(payloads), evlr_offset)

    console.print(Rule("[bold blue]Errors[/bold blue]"))
    demonstrate_errors()

    console.print(Rule("[bold green]Walkthrough Complete![/bold green]"))


if __name__ == "__main__":
    main()
