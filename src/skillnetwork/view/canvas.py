"""
Skill Network Canvas
====================
Paints the latest RenderSnapshot: links, node halos and discs, labels and
the category legend.

The canvas holds a snapshot, never the simulation itself, so painting can
not modify the layout.
"""
from __future__ import annotations

from PySide6.QtCore import QPointF, QRectF, Qt
from PySide6.QtGui import QBrush, QColor, QFont, QPainter, QPen
from PySide6.QtWidgets import QWidget

from skillnetwork.config import VIEWPORT_HEIGHT, VIEWPORT_WIDTH
from skillnetwork.model.state import RenderSnapshot

GROUP_COLORS: dict[int, str] = {
    1: "#3b82f6",  # Technical - Blue
    2: "#10b981",  # Soft - Emerald
}
DEFAULT_GROUP_COLOR = "#f59e0b"  # Tools - Amber

LEGEND: list[tuple[str, str]] = [
    ("Technical Skills", GROUP_COLORS[1]),
    ("Soft Skills", GROUP_COLORS[2]),
    ("Tools & Tech", DEFAULT_GROUP_COLOR),
]

BACKGROUND_COLOR = "#1e293b"

SIZE_CAPTION = "Node size = Skill Proficiency"
CAPTION_WIDTH = 210.0
CAPTION_HEIGHT = 28.0
CAPTION_MARGIN = 12.0


def group_color(group: int) -> str:
    return GROUP_COLORS.get(group, DEFAULT_GROUP_COLOR)


def node_disc_radius(radius: float) -> float:
    return radius * 1.5 + 5.0


def node_halo_radius(radius: float) -> float:
    return radius * 2.5 + 10.0


class SkillNetworkCanvas(QWidget):
    def __init__(self, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self._snapshot = RenderSnapshot()
        self.setMinimumSize(400, 300)

    @property
    def snapshot(self) -> RenderSnapshot:
        return self._snapshot

    def set_snapshot(self, snapshot: RenderSnapshot) -> None:
        self._snapshot = snapshot
        self.update()

    def clear(self) -> None:
        self.set_snapshot(RenderSnapshot())

    # ------------------------------------------------------------------------------
    # Painting
    # ------------------------------------------------------------------------------

    def paintEvent(self, event) -> None:
        painter = QPainter(self)
        painter.setRenderHint(QPainter.Antialiasing)
        painter.fillRect(self.rect(), QColor(BACKGROUND_COLOR))

        # Fit the logical 800x600 viewport, keep aspect ratio, center it
        scale = min(self.width() / VIEWPORT_WIDTH, self.height() / VIEWPORT_HEIGHT)
        painter.save()
        painter.translate(
            (self.width() - VIEWPORT_WIDTH * scale) / 2,
            (self.height() - VIEWPORT_HEIGHT * scale) / 2,
        )
        painter.scale(scale, scale)
        self._paint_links(painter)
        self._paint_nodes(painter)
        painter.restore()

        self._paint_legend(painter)
        self._paint_caption(painter)
        painter.end()

    def _paint_links(self, painter: QPainter) -> None:
        positions = {node.id: QPointF(node.x, node.y) for node in self._snapshot.nodes}
        for link in self._snapshot.links:
            source = positions.get(link.source_id)
            target = positions.get(link.target_id)
            if source is None or target is None:
                continue
            # Weight is a stroke-width hint only
            painter.setPen(QPen(QColor(255, 255, 255, 102), link.weight))
            painter.drawLine(source, target)

    def _paint_nodes(self, painter: QPainter) -> None:
        label_font = QFont(painter.font())
        label_font.setBold(True)
        label_font.setPointSizeF(8.0)

        for node in self._snapshot.nodes:
            center = QPointF(node.x, node.y)
            color = QColor(group_color(node.group))

            # Halo
            halo = QColor(color)
            halo.setAlphaF(0.2)
            painter.setPen(Qt.NoPen)
            painter.setBrush(QBrush(halo))
            halo_r = node_halo_radius(node.radius)
            painter.drawEllipse(center, halo_r, halo_r)

            # Disc
            painter.setPen(QPen(QColor("#ffffff"), 2.0))
            painter.setBrush(QBrush(color))
            disc_r = node_disc_radius(node.radius)
            painter.drawEllipse(center, disc_r, disc_r)

            # Label below the disc
            painter.setFont(label_font)
            painter.setPen(QColor("#f8fafc"))
            label_rect = QRectF(node.x - 80.0, node.y + disc_r + 4.0, 160.0, 18.0)
            painter.drawText(label_rect, Qt.AlignHCenter | Qt.AlignTop, node.id)

    def _paint_legend(self, painter: QPainter) -> None:
        painter.setPen(Qt.NoPen)
        painter.setBrush(QBrush(QColor(255, 255, 255, 204)))
        painter.drawRoundedRect(QRectF(12, 12, 150, 22 * len(LEGEND) + 12), 8, 8)

        for row, (label, color) in enumerate(LEGEND):
            y = 24 + row * 22
            painter.setPen(Qt.NoPen)
            painter.setBrush(QBrush(QColor(color)))
            painter.drawEllipse(QPointF(28, y + 6), 6, 6)
            painter.setPen(QColor("#334155"))
            painter.drawText(QRectF(40, y - 2, 120, 16), Qt.AlignLeft | Qt.AlignVCenter, label)

    def caption_rect(self) -> QRectF:
        """Bottom-right box holding the node size caption, in widget pixels."""
        return QRectF(
            self.width() - CAPTION_WIDTH - CAPTION_MARGIN,
            self.height() - CAPTION_HEIGHT - CAPTION_MARGIN,
            CAPTION_WIDTH,
            CAPTION_HEIGHT,
        )

    def _paint_caption(self, painter: QPainter) -> None:
        rect = self.caption_rect()
        painter.setPen(Qt.NoPen)
        painter.setBrush(QBrush(QColor(219, 234, 254, 230)))
        painter.drawRoundedRect(rect, 8, 8)

        font = QFont(painter.font())
        font.setBold(True)
        painter.setFont(font)
        painter.setPen(QColor("#1e40af"))
        painter.drawText(rect.adjusted(10, 0, -10, 0), Qt.AlignLeft | Qt.AlignVCenter, SIZE_CAPTION)
