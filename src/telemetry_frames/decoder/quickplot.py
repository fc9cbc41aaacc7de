"""
QuickPlot Synthesizer
=====================

Builds a disposable three-group frame from an unstructured field list.

Layout for N fields:
    0  "Quick Plot Data"   datagrid    always
    1  "Multiple Plots"    multiplot   only when N > 1
    2  "Individual Plots"  (none)      always, graph=True,
                                       overview only when N == 1
"""

from typing import List, Sequence

from telemetry_frames.models.frame import Dataset, Frame, Group


QUICK_PLOT_TITLE = "Quick Plot"


def _channels(fields: Sequence[str], group_id: int, graph: bool, overview: bool) -> List[Dataset]:
    return [
        Dataset(
            group_id=group_id,
            index=position,
            title=f"Channel {position}",
            value=value,
            graph=graph,
            display_in_overview=overview,
        )
        for position, value in enumerate(fields, start=1)
    ]


def synthesize_quick_plot(fields: Sequence[str]) -> Frame:
    """
    Build a fresh QuickPlot frame.

    Args:
        fields: Ordered raw field values

    Returns:
        New Frame sharing no structure with any previous message
    """
    count = len(fields)
    groups = [
        Group(
            group_id=0,
            title="Quick Plot Data",
            widget="datagrid",
            datasets=_channels(fields, 0, graph=False, overview=False),
        )
    ]

    if count > 1:
        groups.append(
            Group(
                group_id=1,
                title="Multiple Plots",
                widget="multiplot",
                datasets=_channels(fields, 1, graph=False, overview=False),
            )
        )

    groups.append(
        Group(
            group_id=2,
            title="Individual Plots",
            widget="",
            datasets=_channels(fields, 2, graph=True, overview=(count == 1)),
        )
    )

    return Frame(title=QUICK_PLOT_TITLE, groups=groups)
