"""Board visualization using NetworkX and matplotlib.

Provides visualization of:
- Board topology, with routes coloured by transport kind
- Parallel routes between the same stations drawn side by side
- Detective locations and Mr X's last disclosed location
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Any, Mapping
from collections import defaultdict

import matplotlib.pyplot as plt
import matplotlib.patches as mpatches
import networkx as nx

from core.board import BoardGraph, NodeId
from core.constants import Colour, Transport, HIDDEN_LOCATION


# Color schemes
TRANSPORT_COLORS = {
    Transport.TAXI: "#E9C46A",         # Yellow
    Transport.BUS: "#2A9D8F",          # Teal
    Transport.UNDERGROUND: "#E63946",  # Red
    Transport.FERRY: "#1D3557",        # Navy
}

TRANSPORT_WIDTHS = {
    Transport.TAXI: 1.5,
    Transport.BUS: 2.5,
    Transport.UNDERGROUND: 3.5,
    Transport.FERRY: 2.0,
}

PLAYER_COLORS = {
    Colour.BLACK: "#000000",
    Colour.BLUE: "#457B9D",
    Colour.GREEN: "#2D6A4F",
    Colour.RED: "#C1121F",
    Colour.WHITE: "#F1FAEE",
    Colour.YELLOW: "#FFB703",
}


class BoardVisualizer:
    """Visualizes a pursuit board using NetworkX and matplotlib."""

    def __init__(
        self,
        board: BoardGraph,
        figsize: tuple[int, int] = (12, 10),
        node_size: int = 500,
        font_size: int = 8,
    ):
        """Initialize the visualizer.

        Args:
            board: The BoardGraph to visualize.
            figsize: Figure size as (width, height).
            node_size: Base size for nodes.
            font_size: Font size for labels.
        """
        self.board = board
        self.figsize = figsize
        self.node_size = node_size
        self.font_size = font_size

    def _positions(self) -> dict[NodeId, tuple[float, float]]:
        """Use loaded positions, falling back to a spring layout."""
        G = self.board.to_networkx()
        pos = {
            node_id: self.board.get_position(node_id)
            for node_id in G.nodes
            if self.board.get_position(node_id) is not None
        }
        if len(pos) == G.number_of_nodes():
            # Screen-style coordinates: y grows downwards
            return {n: (x, -y) for n, (x, y) in pos.items()}
        return nx.spring_layout(nx.Graph(G), seed=0)

    def _draw_edges(
        self,
        ax: plt.Axes,
        pos: dict[NodeId, tuple[float, float]],
    ) -> None:
        """Draw routes, offsetting parallel routes between the same nodes."""
        routes: dict[tuple[int, int], list[Transport]] = defaultdict(list)
        for u, v, transport in self.board.to_networkx().edges(data="transport"):
            routes[(min(u, v), max(u, v))].append(transport)

        for (u, v), transports in routes.items():
            ordered = sorted(transports, key=lambda t: t.value)
            for i, transport in enumerate(ordered):
                offset = (i - (len(ordered) - 1) / 2) * 0.06
                self._draw_offset_edge(
                    ax, pos, u, v,
                    TRANSPORT_COLORS[transport],
                    offset,
                    TRANSPORT_WIDTHS[transport],
                    dashed=transport is Transport.FERRY,
                )

    def _draw_offset_edge(
        self,
        ax: plt.Axes,
        pos: dict[NodeId, tuple[float, float]],
        u: int,
        v: int,
        color: str,
        offset: float,
        width: float,
        dashed: bool = False,
    ) -> None:
        """Draw an edge with perpendicular offset (for parallel lines)."""
        x1, y1 = pos[u]
        x2, y2 = pos[v]

        dx = x2 - x1
        dy = y2 - y1
        length = (dx**2 + dy**2) ** 0.5
        px, py = (0.0, 0.0)
        if length > 0:
            # Perpendicular unit vector
            px = -dy / length
            py = dx / length

        ax.plot(
            [x1 + px * offset, x2 + px * offset],
            [y1 + py * offset, y2 + py * offset],
            color=color,
            linewidth=width,
            linestyle="--" if dashed else "-",
            solid_capstyle="round",
            zorder=1,
        )

    def _draw_players(
        self,
        ax: plt.Axes,
        pos: dict[NodeId, tuple[float, float]],
        locations: Mapping[Colour, NodeId],
    ) -> None:
        """Draw a ring around each occupied node in the player's colour."""
        for colour, node_id in locations.items():
            if node_id == HIDDEN_LOCATION or node_id not in pos:
                continue
            x, y = pos[node_id]
            ax.scatter(
                [x], [y],
                s=self.node_size * 2,
                facecolors="none",
                edgecolors=PLAYER_COLORS[colour],
                linewidths=3,
                zorder=4,
            )

    def visualize(
        self,
        title: str = "Pursuit Board",
        player_locations: Optional[Mapping[Colour, NodeId]] = None,
        show_legend: bool = True,
        save_path: Optional[str | Path] = None,
        show: bool = True,
    ) -> plt.Figure:
        """Visualize the board.

        Args:
            title: Title for the figure.
            player_locations: Locations to mark, e.g. from a GameView.
            show_legend: Whether to show the legend.
            save_path: If provided, save the figure to this path.
            show: Whether to display the figure.

        Returns:
            The matplotlib Figure object.
        """
        G = self.board.to_networkx()
        pos = self._positions()

        fig, ax = plt.subplots(figsize=self.figsize)
        ax.set_title(title, fontsize=14, fontweight="bold")

        self._draw_edges(ax, pos)

        nx.draw_networkx_nodes(
            G, pos,
            node_color="#FFFFFF",
            edgecolors="#333333",
            linewidths=1.5,
            node_size=self.node_size,
            ax=ax,
        )
        nx.draw_networkx_labels(
            G, pos,
            font_size=self.font_size,
            font_weight="bold",
            ax=ax,
        )

        if player_locations:
            self._draw_players(ax, pos, player_locations)

        if show_legend:
            self._draw_legend(ax, player_locations or {})

        ax.set_aspect("equal")
        ax.axis("off")
        plt.tight_layout()

        if save_path:
            fig.savefig(save_path, dpi=150, bbox_inches="tight")

        if show:
            plt.show()

        return fig

    def _draw_legend(self, ax: plt.Axes, player_locations: Mapping[Colour, NodeId]) -> None:
        """Draw the legend."""
        legend_elements = [
            plt.Line2D([0], [0], color=color, linewidth=TRANSPORT_WIDTHS[t], label=t.value.title())
            for t, color in TRANSPORT_COLORS.items()
        ]
        for colour in player_locations:
            label = "Mr X (last seen)" if colour.is_mrx() else colour.value.title()
            legend_elements.append(
                mpatches.Patch(facecolor="none", edgecolor=PLAYER_COLORS[colour], label=label)
            )

        ax.legend(
            handles=legend_elements,
            loc="upper left",
            bbox_to_anchor=(1.02, 1),
            fontsize=8,
        )


def visualize_board(
    board: BoardGraph,
    title: str = "Pursuit Board",
    save_path: Optional[str | Path] = None,
    show: bool = True,
    **kwargs: Any,
) -> plt.Figure:
    """Convenience function to visualize a board.

    Args:
        board: The BoardGraph to visualize.
        title: Title for the figure.
        save_path: If provided, save the figure to this path.
        show: Whether to display the figure.
        **kwargs: Additional arguments passed to BoardVisualizer.visualize()
    """
    visualizer = BoardVisualizer(board)
    return visualizer.visualize(title=title, save_path=save_path, show=show, **kwargs)


def visualize_game(view: Any, save_path: Optional[str | Path] = None, show: bool = True) -> plt.Figure:
    """Visualize a game in progress from a GameView (spectator-safe)."""
    locations = {
        colour: view.get_player_location(colour)
        for colour in view.get_players()
    }
    return visualize_board(
        view.get_board(),
        title=f"Round {view.get_current_round()} of {len(view.get_rounds())}",
        player_locations=locations,
        save_path=save_path,
        show=show,
    )


def visualize_default_board(
    save_path: Optional[str | Path] = None,
    show: bool = True,
) -> plt.Figure:
    """Load and visualize the default board."""
    from data.loader import load_default_board

    return visualize_board(load_default_board(), title="Default Board", save_path=save_path, show=show)


if __name__ == "__main__":
    visualize_default_board(save_path="default_board_vis.png")
