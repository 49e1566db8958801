"""Tests for the command-line interface."""

import json

import pytest

from popup_gallery.config import AppSettings, RetryConfig, SourceConfig
from popup_gallery.main import (
    apply_overrides,
    create_argument_parser,
    format_listing,
    format_results,
    main,
    run_explore,
)
from popup_gallery.models import FilterCriterion
from popup_gallery.sources import SAMPLE_LISTINGS


def quick_settings(**source_options) -> AppSettings:
    return AppSettings(
        source=SourceConfig(**source_options),
        retry=RetryConfig(max_retries=1, backoff_base_seconds=0.0)
    )


def test_format_space_listing():
    output = format_listing(SAMPLE_LISTINGS[0])

    assert "Modern Gallery Space [space]" in output
    assert "Location: Downtown SF (37.7749, -122.4194)" in output
    assert "Owner: Sarah Johnson" in output
    assert "Price: $150/day" in output
    assert "Size: 1200 sq ft" in output
    assert "Available: March 15-30" in output
    assert "Style:" not in output


def test_format_artist_listing():
    output = format_listing(SAMPLE_LISTINGS[1])

    assert "Contemporary Paintings [artist]" in output
    assert "Style: Contemporary Abstract" in output
    assert "Price:" not in output


def test_format_results_empty():
    assert format_results([]) == "No listings found matching your criteria.\n"


def test_format_results_marks_stale():
    output = format_results(list(SAMPLE_LISTINGS), stale=True)

    assert "Found 2 listing(s) (stale, last refresh failed)" in output


def test_parser_defaults():
    args = create_argument_parser().parse_args([])

    assert args.search_text == ""
    assert args.filter == "all"
    assert args.source is None
    assert not args.verbose


def test_parser_rejects_unknown_filter():
    with pytest.raises(SystemExit):
        create_argument_parser().parse_args(["--filter", "venues"])


def test_apply_overrides_switches_source():
    settings = apply_overrides(quick_settings(), source="file", path="listings.json")

    assert settings.source.kind == "file"
    assert settings.source.path == "listings.json"


@pytest.mark.asyncio
async def test_run_explore_prints_matches(capsys):
    exit_code = await run_explore(
        search_text="gallery",
        criterion=FilterCriterion.ALL,
        settings=quick_settings()
    )

    captured = capsys.readouterr()
    assert exit_code == 0
    assert "Modern Gallery Space" in captured.out
    assert "Contemporary Paintings" not in captured.out
    assert "1 of 2 listing(s) shown" in captured.out


@pytest.mark.asyncio
async def test_run_explore_no_matches_is_success(capsys):
    exit_code = await run_explore(
        search_text="contemporary",
        criterion=FilterCriterion.SPACES_ONLY,
        settings=quick_settings()
    )

    assert exit_code == 0
    assert "No listings found" in capsys.readouterr().out


@pytest.mark.asyncio
async def test_run_explore_source_failure_exits_with_suggestions(tmp_path, capsys):
    settings = quick_settings(kind="file", path=str(tmp_path / "missing.json"))

    exit_code = await run_explore(settings=settings)

    captured = capsys.readouterr()
    assert exit_code == 1
    assert "Could not load listings" in captured.err
    assert "LISTINGS_PATH" in captured.err


@pytest.mark.asyncio
async def test_run_explore_invalid_configuration(capsys):
    exit_code = await run_explore(settings=quick_settings(kind="http"))

    assert exit_code == 1
    assert "LISTINGS_URL" in capsys.readouterr().err


def test_main_reads_file_source(tmp_path, capsys):
    path = tmp_path / "listings.json"
    path.write_text(json.dumps([listing.to_dict() for listing in SAMPLE_LISTINGS]), encoding="utf-8")

    exit_code = main(["mission", "--filter", "artists", "--source", "file", "--path", str(path)])

    assert exit_code == 0
    assert "Contemporary Paintings" in capsys.readouterr().out


@pytest.mark.parametrize("name,value,message", [
    ("MAX_RETRIES", "abc", "MAX_RETRIES must be a valid int"),
    ("MAX_RETRIES", "0", "max_retries must be at least 1"),
    ("LOG_LEVEL", "bogus", "Unknown log level 'BOGUS'"),
    ("REQUEST_TIMEOUT_SECONDS", "soon", "REQUEST_TIMEOUT_SECONDS must be a valid float"),
    ("LISTING_SOURCE", "ftp", "Unknown listing source 'ftp'"),
])
def test_main_rejects_invalid_environment(monkeypatch, capsys, name, value, message):
    monkeypatch.setenv(name, value)

    exit_code = main([])

    captured = capsys.readouterr()
    assert exit_code == 1
    assert f"Error: {message}" in captured.err
    assert "Traceback" not in captured.err
