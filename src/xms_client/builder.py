"""
URL and query-string construction for XMS requests.

Every URL has the shape ``<endpoint>/v1/<service_plan_id><sub_path>``.
Identifiers interpolated into paths are percent-encoded. Query builders
emit keys in a fixed order so that output is deterministic; keys whose
filter field is ``None`` are left out.
"""

from __future__ import annotations

from datetime import date
from typing import Iterable
from urllib.parse import quote, quote_plus

from .api import BatchFilter, GroupFilter, InboundsFilter
from .config import API_VERSION, EndpointConfig


# ---------------------------------------------------------------------------
# Paths
# ---------------------------------------------------------------------------

def build_url(config: EndpointConfig, sub_path: str) -> str:
    """
    Build an absolute endpoint URL.

    Args:
        config: Endpoint configuration.
        sub_path: Resource path beginning with ``/``, optionally with a query.

    Returns:
        e.g. ``'https://api.clxcommunications.com/xms/v1/plan/batches'``.
    """
    return f"{config.endpoint}/{API_VERSION}/{config.service_plan_id}{sub_path}"


def _with_query(path: str, query: str) -> str:
    return f"{path}?{query}" if query else path


def build_batch_url(config: EndpointConfig, batch_id: str, sub_path: str = "") -> str:
    """
    URL of one batch, or of a resource below it.

    Args:
        config: Endpoint configuration.
        batch_id: Batch identifier; percent-encoded into the path.
        sub_path: Optional suffix such as ``'/tags'`` or ``'/delivery_report'``.

    Returns:
        e.g. ``'<endpoint>/v1/plan/batches/abc123/tags'``.
    """
    return build_url(config, f"/batches/{quote(batch_id, safe='')}{sub_path}")


def build_group_url(config: EndpointConfig, group_id: str, sub_path: str = "") -> str:
    """
    URL of one group, or of a resource below it.

    Args:
        config: Endpoint configuration.
        group_id: Group identifier; percent-encoded into the path.
        sub_path: Optional suffix such as ``'/members'`` or ``'/tags'``.

    Returns:
        e.g. ``'<endpoint>/v1/plan/groups/grp1/members'``.
    """
    return build_url(config, f"/groups/{quote(group_id, safe='')}{sub_path}")


def build_inbound_url(config: EndpointConfig, inbound_id: str) -> str:
    """URL of one inbound message; ``inbound_id`` is percent-encoded."""
    return build_url(config, f"/inbounds/{quote(inbound_id, safe='')}")


def build_batches_url(config: EndpointConfig, page: int, filter: BatchFilter | None) -> str:
    """
    URL of one page of the batch listing.

    Args:
        config: Endpoint configuration.
        page: 0-based page index.
        filter: Listing filter, or ``None`` for the unfiltered listing.

    Returns:
        e.g. ``'<endpoint>/v1/plan/batches?page=0&page_size=10'``.
    """
    return build_url(config, _with_query("/batches", batches_query(page, filter)))


def build_groups_url(config: EndpointConfig, page: int, filter: GroupFilter | None) -> str:
    """URL of one page of the group listing. See :func:`groups_query`."""
    return build_url(config, _with_query("/groups", groups_query(page, filter)))


def build_inbounds_url(config: EndpointConfig, page: int, filter: InboundsFilter | None) -> str:
    """URL of one page of the inbound message listing. See :func:`inbounds_query`."""
    return build_url(config, _with_query("/inbounds", inbounds_query(page, filter)))


def build_dry_run_url(config: EndpointConfig, number_of_recipients: int | None) -> str:
    """
    URL for simulating a batch send.

    Args:
        config: Endpoint configuration.
        number_of_recipients: How many recipients to report per-recipient
            detail for; ``None`` omits the detail.

    Returns:
        e.g. ``'<endpoint>/v1/plan/batches/dry_run?per_recipient=true&number_of_recipients=3'``.
    """
    return build_url(
        config, _with_query("/batches/dry_run", dry_run_query(number_of_recipients))
    )


def build_delivery_report_url(
    config: EndpointConfig,
    batch_id: str,
    report_type: str | None,
    status: Iterable[str] | None,
    code: Iterable[int] | None,
) -> str:
    """
    URL of a batch delivery report.

    Args:
        config: Endpoint configuration.
        batch_id: Batch the report belongs to.
        report_type: ``'summary'`` or ``'full'``; ``None`` leaves the choice to the server.
        status: Delivery statuses to include; ``None`` includes all.
        code: Status codes to include; ``None`` includes all.

    Returns:
        e.g. ``'<endpoint>/v1/plan/batches/abc123/delivery_report?type=full'``.
    """
    query = delivery_report_query(report_type, status, code)
    return build_batch_url(config, batch_id, _with_query("/delivery_report", query))


def build_recipient_delivery_report_url(
    config: EndpointConfig, batch_id: str, recipient: str
) -> str:
    """URL of the delivery report for a single recipient of a batch."""
    return build_batch_url(config, batch_id, f"/delivery_report/{quote_plus(recipient)}")


# ---------------------------------------------------------------------------
# Query strings
# ---------------------------------------------------------------------------

def _join(values: Iterable) -> str:
    """Comma-join then URL-encode, so ``['a', 'b']`` becomes ``'a%2Cb'``."""
    return quote_plus(",".join(str(value) for value in values))


def _day(value: date) -> str:
    return value.strftime("%Y-%m-%d")


def _page_params(page: int, page_size: int | None) -> list[str]:
    params = [f"page={page}"]
    if page_size is not None:
        params.append(f"page_size={page_size}")
    return params


def batches_query(page: int, filter: BatchFilter | None = None) -> str:
    """
    Query string for listing batches.

    Key order: ``page``, ``page_size``, ``from``, ``tags``, ``start_date``,
    ``end_date``.
    """
    if filter is None:
        return f"page={page}"

    params = _page_params(page, filter.page_size)
    if filter.senders is not None:
        params.append(f"from={_join(filter.senders)}")
    if filter.tags is not None:
        params.append(f"tags={_join(filter.tags)}")
    if filter.start_date is not None:
        params.append(f"start_date={_day(filter.start_date)}")
    if filter.end_date is not None:
        params.append(f"end_date={_day(filter.end_date)}")
    return "&".join(params)


def groups_query(page: int, filter: GroupFilter | None = None) -> str:
    """Query string for listing groups: ``page``, ``page_size``, ``tags``."""
    if filter is None:
        return f"page={page}"

    params = _page_params(page, filter.page_size)
    if filter.tags is not None:
        params.append(f"tags={_join(filter.tags)}")
    return "&".join(params)


def inbounds_query(page: int, filter: InboundsFilter | None = None) -> str:
    """
    Query string for listing inbound messages.

    Key order: ``page``, ``page_size``, ``to``, ``start_date``, ``end_date``.
    """
    if filter is None:
        return f"page={page}"

    params = _page_params(page, filter.page_size)
    if filter.recipients is not None:
        params.append(f"to={_join(filter.recipients)}")
    if filter.start_date is not None:
        params.append(f"start_date={_day(filter.start_date)}")
    if filter.end_date is not None:
        params.append(f"end_date={_day(filter.end_date)}")
    return "&".join(params)


def dry_run_query(number_of_recipients: int | None) -> str:
    if number_of_recipients is None:
        return ""
    return f"per_recipient=true&number_of_recipients={number_of_recipients}"


def delivery_report_query(
    report_type: str | None = None,
    status: Iterable[str] | None = None,
    code: Iterable[int] | None = None,
) -> str:
    """
    Query string for a batch delivery report; empty when nothing is set.

    Empty ``status``/``code`` lists are treated as unset so the server
    defaults (all statuses, all codes) apply.
    """
    params = []
    if report_type is not None:
        params.append(f"type={report_type}")
    if status:
        params.append(f"status={_join(status)}")
    if code:
        params.append(f"code={_join(code)}")
    return "&".join(params)
