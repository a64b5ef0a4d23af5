"""Typer CLI entrypoint."""

from __future__ import annotations

import json
from pathlib import Path

import typer

from beaconscan.api import Client
from beaconscan.core.capture import identifier_from_address
from beaconscan.core.errors import BeaconscanError
from beaconscan.core.model import AdvertisementReport, BeaconRecord, BeaconType, ServiceData

app = typer.Typer(help="Decode iBeacon, Eddystone and Estimote BLE advertisements")


def _build_client() -> Client:
    client = Client()
    for warning in getattr(client, "load_warnings", ()):
        typer.echo(f"Warning: {warning}", err=True)
    return client


def _use_json(client: Client, as_json: bool) -> bool:
    return as_json or client.settings.output_format == "json"


def _echo_record(record: BeaconRecord, as_json: bool) -> None:
    if as_json:
        typer.echo(json.dumps(record.to_dict(), sort_keys=True))
        return
    name = f" ({record.local_name})" if record.local_name else ""
    typer.echo(f"{record.address}{name} rssi={record.rssi} {record.beacon_type.value}")
    for key, value in record.to_dict()[record.beacon_type.value].items():
        typer.echo(f"  {key}: {value}")


def _parse_hex(value: str, option: str) -> bytes:
    try:
        return bytes.fromhex(value.replace(":", "").replace(" ", ""))
    except ValueError:
        raise typer.BadParameter(f"{value!r} is not valid hex", param_hint=option) from None


def _parse_service_data(values: list[str]) -> tuple[ServiceData, ...]:
    entries: list[ServiceData] = []
    for value in values:
        uuid, sep, data = value.partition("=")
        if not sep or not uuid:
            raise typer.BadParameter(f"{value!r} must look like UUID=HEX", param_hint="--service-data")
        entries.append(ServiceData(uuid=uuid, data=_parse_hex(data, "--service-data")))
    return tuple(entries)


@app.command("formats")
def list_formats() -> None:
    """List the beacon formats this tool recognizes."""
    for beacon_type in BeaconType.recognized():
        typer.echo(beacon_type.value)


@app.command("decode")
def decode_advertisement(
    manufacturer_data: str | None = typer.Option(None, "--manufacturer-data", "-m", help="Manufacturer data hex"),
    service_data: list[str] = typer.Option([], "--service-data", "-s", help="Service data as UUID=HEX"),
    rssi: int = typer.Option(0, "--rssi", help="Signal strength to report"),
    address: str = typer.Option("00:00:00:00:00:00", "--address", help="Device address"),
    name: str | None = typer.Option(None, "--name", help="Advertised local name"),
    as_json: bool = typer.Option(False, "--json", help="Print records as JSON"),
) -> None:
    """Decode one advertisement given as hex on the command line."""
    try:
        client = _build_client()
        report = AdvertisementReport(
            identifier=identifier_from_address(address),
            address=address,
            rssi=rssi,
            local_name=name,
            manufacturer_data=_parse_hex(manufacturer_data, "--manufacturer-data") if manufacturer_data else None,
            service_data=_parse_service_data(service_data),
        )
        record = client.decode(report)
        if record is None:
            typer.echo("Advertisement not recognized", err=True)
            raise typer.Exit(code=1)
        _echo_record(record, _use_json(client, as_json))
    except BeaconscanError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None


@app.command("replay")
def replay_capture(
    capture: Path = typer.Argument(..., help="YAML capture file"),
    as_json: bool = typer.Option(False, "--json", help="Print records as JSON"),
) -> None:
    """Decode every advertisement recorded in a capture file."""
    try:
        client = _build_client()
        records = client.replay(capture)
        if not records:
            typer.echo("No beacons decoded")
            return
        for record in records:
            _echo_record(record, _use_json(client, as_json))
    except BeaconscanError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None


@app.command("scan")
def scan(
    timeout: float | None = typer.Option(None, "--timeout", "-t", help="Scan duration in seconds"),
    as_json: bool = typer.Option(False, "--json", help="Print records as JSON"),
) -> None:
    """Scan for beacons with bleak and print each decoded advertisement."""
    try:
        client = _build_client()
        use_json = _use_json(client, as_json)
        count = client.scan(lambda record: _echo_record(record, use_json), timeout_s=timeout)
        if not count:
            typer.echo("No beacons found")
    except BeaconscanError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None


def run() -> None:
    app()


if __name__ == "__main__":
    run()
