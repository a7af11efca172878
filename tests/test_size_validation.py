from __future__ import annotations

import pytest

from conftest import REGISTRY_URI, REPOSITORY, FakeResponse, image_payload, tag_payload, tag_url, tags_url
from docksize.managers.registry import ImageReference, RegistryLookupError
from docksize.managers.validation import failed_variants, is_size_increase_allowed, validate_variants
from docksize.managers.validation_manager import ValidationManager
from docksize.utils import get_percentage_increase

CURRENT_TAG = "2022.04.2-linux"


def _setup_registry(session, current_images, previous_images, previous_tag="2022.04.1-linux") -> None:
    session.route("get", tag_url(CURRENT_TAG), FakeResponse(200, tag_payload(CURRENT_TAG, "2022-04-20T00:00:00Z", current_images)))
    session.route(
        "get",
        tags_url(),
        FakeResponse(
            200,
            {
                "results": [
                    tag_payload(CURRENT_TAG, "2022-04-20T00:00:00Z", current_images),
                    tag_payload(previous_tag, "2022-04-10T00:00:00Z", previous_images),
                ]
            },
        ),
    )


def test_percentage_change_is_signed() -> None:
    assert get_percentage_increase(1100, 1000) == pytest.approx(10.0)
    assert get_percentage_increase(900, 1000) == pytest.approx(-10.0)


@pytest.mark.parametrize(
    "change, allowed",
    [(10.0, False), (3.0, True), (5.0, True), (5.01, False), (-20.0, True)],
)
def test_threshold_is_strict(change: float, allowed: bool) -> None:
    assert is_size_increase_allowed(change, 5.0) is allowed


def test_variant_growing_past_threshold_fails(client, session, capsys) -> None:
    _setup_registry(session, [image_payload("linux", 1100)], [image_payload("linux", 1000)])

    outcomes = validate_variants(client, ImageReference(REPOSITORY, CURRENT_TAG), 5.0)

    assert len(outcomes) == 1
    assert outcomes[0].percentage_change == pytest.approx(10.0)
    assert outcomes[0].previous_tag == "2022.04.1-linux"
    assert outcomes[0].passed is False
    assert [v.size for v in failed_variants(outcomes)] == [1100]
    out = capsys.readouterr().out
    assert "##teamcity[buildStatisticValue key='SIZE-teamcity-agent-linux' value='1100']" in out


def test_variant_within_threshold_passes(client, session) -> None:
    _setup_registry(session, [image_payload("linux", 1030)], [image_payload("linux", 1000)])

    outcomes = validate_variants(client, ImageReference(REPOSITORY, CURRENT_TAG), 5.0)

    assert outcomes[0].percentage_change == pytest.approx(3.0)
    assert outcomes[0].passed is True
    assert failed_variants(outcomes) == []


def test_change_equal_to_threshold_passes(client, session) -> None:
    _setup_registry(session, [image_payload("linux", 1050)], [image_payload("linux", 1000)])

    outcomes = validate_variants(client, ImageReference(REPOSITORY, CURRENT_TAG), 5.0)

    assert outcomes[0].passed is True


def test_each_variant_is_compared_with_its_own_os(client, session, capsys) -> None:
    _setup_registry(
        session,
        [image_payload("linux", 1100), image_payload("windows", 5000, os_version="10.0.17763.2803")],
        [image_payload("linux", 1000), image_payload("windows", 5000, os_version="10.0.17763.2803")],
        previous_tag="2022.04.1-linux-windows",
    )

    outcomes = validate_variants(client, ImageReference(REPOSITORY, CURRENT_TAG), 5.0)

    assert [(o.variant.os, o.passed) for o in outcomes] == [("linux", False), ("windows", True)]
    assert capsys.readouterr().out.count("##teamcity[buildStatisticValue") == 2


def test_unresolved_predecessor_is_skipped_not_failed(client, session, log_messages) -> None:
    _setup_registry(session, [image_payload("linux", 5000)], [image_payload("windows", 1000)])

    outcomes = validate_variants(client, ImageReference(REPOSITORY, CURRENT_TAG), 5.0)

    assert outcomes[0].previous is None
    assert outcomes[0].percentage_change is None
    assert outcomes[0].passed is True
    assert any("teamcity-agent:2022.04.2-linux-linux" in message for message in log_messages)


def test_ambiguous_predecessor_is_skipped(client, session) -> None:
    _setup_registry(
        session,
        [image_payload("linux", 5000)],
        [image_payload("linux", 1000, architecture="amd64"), image_payload("linux", 900, architecture="arm64")],
    )

    outcomes = validate_variants(client, ImageReference(REPOSITORY, CURRENT_TAG), 5.0)

    assert outcomes[0].previous is None
    assert failed_variants(outcomes) == []


def test_zero_sized_predecessor_is_skipped(client, session) -> None:
    _setup_registry(session, [image_payload("linux", 5000)], [image_payload("linux", 0)])

    outcomes = validate_variants(client, ImageReference(REPOSITORY, CURRENT_TAG), 5.0)

    assert outcomes[0].percentage_change is None
    assert outcomes[0].passed is True


def test_missing_current_tag_is_fatal(client, session) -> None:
    with pytest.raises(RegistryLookupError):
        validate_variants(client, ImageReference(REPOSITORY, CURRENT_TAG), 5.0)


def test_manager_returns_failing_variants(client, session) -> None:
    _setup_registry(session, [image_payload("linux", 2000)], [image_payload("linux", 1000)])
    manager = ValidationManager(REGISTRY_URI, client=client)

    failed = manager.validate_image_size(f"{REPOSITORY}:{CURRENT_TAG}", 5.0)

    assert [v.size for v in failed] == [2000]


def test_manager_finds_previous_image(client, session) -> None:
    _setup_registry(session, [image_payload("linux", 2000)], [image_payload("linux", 1000)])
    manager = ValidationManager(REGISTRY_URI, client=client)

    previous = manager.find_previous_image(f"{REPOSITORY}:{CURRENT_TAG}")

    assert previous == ImageReference(REPOSITORY, "2022.04.1-linux")
