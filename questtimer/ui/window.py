"""Main window — a thin view over :class:`QuestController`.

Layout (top → bottom):
    - Companion speech line
    - Mode label, clock, progress bar
    - Start/Pause + Reset, mode buttons
    - Dragon of the Day card
    - Treasure collection card
    - Quest progress + ambient sound row

The window holds no quest state.  Every refresh re-reads
``controller.snapshot()``.
"""

from __future__ import annotations

from PyQt6.QtCore import Qt
from PyQt6.QtWidgets import (
    QMainWindow, QWidget, QVBoxLayout, QHBoxLayout, QGroupBox,
    QLabel, QPushButton, QLineEdit, QListWidget, QListWidgetItem,
    QProgressBar, QComboBox, QSlider, QSpinBox,
)

from ..audio.ambient import AMBIENT_SOUNDS, AmbientPlayer
from ..errors import QuestError
from ..quest.controller import QuestController
from ..timer.engine import TimerMode, TimerState


MODE_LABELS: dict[TimerMode, str] = {
    TimerMode.POMODORO:       "Focus Spell",
    TimerMode.BREAK:          "Rest",
    TimerMode.QUICKWIN:       "Quick Win",
    TimerMode.CUSTOM:         "Custom Quest",
    TimerMode.DRAGON_SLAYING: "Dragon Battle",
    TimerMode.TREASURE_HUNT:  "Treasure Hunt",
}

_MODE_BUTTONS = (
    (TimerMode.POMODORO, "Focus"),
    (TimerMode.BREAK, "Break"),
    (TimerMode.QUICKWIN, "Quick Win"),
    (TimerMode.CUSTOM, "Custom"),
)

_PROGRESS_STEPS = 1000
_MAX_MINUTES = 180


class QuestWindow(QMainWindow):
    """Main application window."""

    def __init__(
        self,
        controller: QuestController,
        ambient: AmbientPlayer | None = None,
        parent: QWidget | None = None,
    ) -> None:
        super().__init__(parent)
        self._controller = controller
        self._ambient = ambient
        self.setWindowTitle(f"QuestTimer — {controller.adventurer_name}")

        self._build_ui()
        self._connect_signals()
        self._refresh()

    # ── build ─────────────────────────────────────────────────────────────

    def _build_ui(self) -> None:
        central = QWidget(self)
        self.setCentralWidget(central)
        root = QVBoxLayout(central)
        root.setSpacing(12)

        self._speech = QLabel(
            f"{self._controller.companion_name} is here to help!", central,
        )
        self._speech.setWordWrap(True)
        root.addWidget(self._speech)

        # ── clock ────────────────────────────────────────────────────
        self._mode_label = QLabel(central)
        self._mode_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        root.addWidget(self._mode_label)

        self._clock = QLabel(central)
        self._clock.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self._clock.setStyleSheet("font-size: 48px; font-family: monospace;")
        root.addWidget(self._clock)

        self._progress = QProgressBar(central)
        self._progress.setRange(0, _PROGRESS_STEPS)
        self._progress.setTextVisible(False)
        root.addWidget(self._progress)

        controls = QHBoxLayout()
        self._start_pause_btn = QPushButton("Start", central)
        self._reset_btn = QPushButton("Reset", central)
        controls.addWidget(self._start_pause_btn)
        controls.addWidget(self._reset_btn)
        root.addLayout(controls)

        modes = QHBoxLayout()
        self._mode_buttons: dict[TimerMode, QPushButton] = {}
        for mode, text in _MODE_BUTTONS:
            btn = QPushButton(text, central)
            btn.setCheckable(True)
            self._mode_buttons[mode] = btn
            modes.addWidget(btn)
        self._custom_minutes = self._minutes_box(TimerMode.CUSTOM, central)
        modes.addWidget(self._custom_minutes)
        root.addLayout(modes)

        # ── dragon ───────────────────────────────────────────────────
        dragon_box = QGroupBox("Dragon of the Day", central)
        dragon_layout = QVBoxLayout(dragon_box)
        self._dragon_input = QLineEdit(dragon_box)
        self._dragon_input.setPlaceholderText("What's your biggest task today?")
        dragon_layout.addWidget(self._dragon_input)

        self._dragon_info = QLabel(dragon_box)
        dragon_layout.addWidget(self._dragon_info)

        dragon_row = QHBoxLayout()
        self._dragon_minutes = self._minutes_box(TimerMode.DRAGON_SLAYING, dragon_box)
        dragon_row.addWidget(self._dragon_minutes)
        self._hunt_dragon_btn = QPushButton("Begin Dragon Hunt!", dragon_box)
        self._slay_btn = QPushButton("Dragon Slain!", dragon_box)
        self._retreat_btn = QPushButton("Retreat", dragon_box)
        self._new_dragon_btn = QPushButton("New Dragon Hunt", dragon_box)
        for btn in (
            self._hunt_dragon_btn, self._slay_btn,
            self._retreat_btn, self._new_dragon_btn,
        ):
            dragon_row.addWidget(btn)
        dragon_layout.addLayout(dragon_row)
        root.addWidget(dragon_box)

        # ── treasures ────────────────────────────────────────────────
        treasure_box = QGroupBox("Treasure Collection", central)
        treasure_layout = QVBoxLayout(treasure_box)
        add_row = QHBoxLayout()
        self._treasure_input = QLineEdit(treasure_box)
        self._treasure_input.setPlaceholderText("New treasure to collect...")
        self._add_treasure_btn = QPushButton("Add", treasure_box)
        add_row.addWidget(self._treasure_input)
        add_row.addWidget(self._add_treasure_btn)
        treasure_layout.addLayout(add_row)

        self._treasure_list = QListWidget(treasure_box)
        treasure_layout.addWidget(self._treasure_list)

        treasure_row = QHBoxLayout()
        self._treasure_minutes = self._minutes_box(TimerMode.TREASURE_HUNT, treasure_box)
        treasure_row.addWidget(self._treasure_minutes)
        self._hunt_treasure_btn = QPushButton("Hunt", treasure_box)
        self._collect_btn = QPushButton("Collect", treasure_box)
        self._abandon_btn = QPushButton("Abandon", treasure_box)
        self._delete_treasure_btn = QPushButton("Delete", treasure_box)
        for btn in (
            self._hunt_treasure_btn, self._collect_btn,
            self._abandon_btn, self._delete_treasure_btn,
        ):
            treasure_row.addWidget(btn)
        treasure_layout.addLayout(treasure_row)
        root.addWidget(treasure_box)

        # ── stats + ambient ──────────────────────────────────────────
        self._stats = QLabel(central)
        root.addWidget(self._stats)

        ambient_row = QHBoxLayout()
        self._sound_combo = QComboBox(central)
        for sound in AMBIENT_SOUNDS:
            self._sound_combo.addItem(f"{sound.icon} {sound.name}", sound.id)
        self._volume_slider = QSlider(Qt.Orientation.Horizontal, central)
        self._volume_slider.setRange(0, 100)
        if self._ambient is not None:
            self._volume_slider.setValue(self._ambient.volume)
            index = self._sound_combo.findData(self._ambient.current)
            self._sound_combo.setCurrentIndex(max(0, index))
        ambient_row.addWidget(self._sound_combo)
        ambient_row.addWidget(self._volume_slider)
        root.addLayout(ambient_row)
        self._sound_combo.setEnabled(self._ambient is not None)
        self._volume_slider.setEnabled(self._ambient is not None)

    def _minutes_box(self, mode: TimerMode, parent: QWidget) -> QSpinBox:
        """Duration picker preloaded with *mode*'s current length."""
        box = QSpinBox(parent)
        box.setRange(1, _MAX_MINUTES)
        box.setSuffix(" min")
        seconds = self._controller.engine.duration_for(mode)
        box.setValue(max(1, min(seconds // 60, _MAX_MINUTES)))
        return box

    # ── signals ───────────────────────────────────────────────────────────

    def _connect_signals(self) -> None:
        c = self._controller
        self._start_pause_btn.clicked.connect(self._guarded(c.toggle))
        self._reset_btn.clicked.connect(c.reset)
        for mode, btn in self._mode_buttons.items():
            btn.clicked.connect(self._guarded(lambda _=False, m=mode: self._on_mode_clicked(m)))

        self._dragon_input.editingFinished.connect(self._on_dragon_edited)
        self._hunt_dragon_btn.clicked.connect(self._guarded(self._on_hunt_dragon))
        self._slay_btn.clicked.connect(self._guarded(c.slay_dragon))
        self._retreat_btn.clicked.connect(self._guarded(c.retreat_from_dragon))
        self._new_dragon_btn.clicked.connect(self._on_new_dragon)

        self._add_treasure_btn.clicked.connect(self._guarded(self._on_add_treasure))
        self._treasure_input.returnPressed.connect(self._guarded(self._on_add_treasure))
        self._hunt_treasure_btn.clicked.connect(self._guarded(self._on_hunt_treasure))
        self._collect_btn.clicked.connect(self._guarded(c.collect_treasure))
        self._abandon_btn.clicked.connect(c.abandon_treasure_hunt)
        self._delete_treasure_btn.clicked.connect(self._guarded(self._on_delete_treasure))

        if self._ambient is not None:
            self._sound_combo.currentIndexChanged.connect(self._on_sound_selected)
            self._volume_slider.valueChanged.connect(self._ambient.set_volume)

        c.changed.connect(self._refresh)
        c.message.connect(self._speech.setText)
        c.celebrated.connect(self._on_celebrated)

    def _guarded(self, action):
        """Wrap a slot so rejected actions land in the status bar."""

        def slot(*args) -> None:
            try:
                action()
            except QuestError as exc:
                self.statusBar().showMessage(str(exc), 4000)

        return slot

    # ── slots ─────────────────────────────────────────────────────────────

    def _on_mode_clicked(self, mode: TimerMode) -> None:
        if mode == TimerMode.CUSTOM:
            self._controller.switch_mode(mode, self._custom_minutes.value() * 60)
        else:
            self._controller.switch_mode(mode)

    def _on_dragon_edited(self) -> None:
        text = self._dragon_input.text()
        dragon = self._controller.ledger.dragon
        if text.strip() and text.strip() != dragon.description and not dragon.is_completed:
            self._controller.set_dragon(text)

    def _on_hunt_dragon(self) -> None:
        self._controller.set_dragon(self._dragon_input.text())
        self._controller.begin_dragon_hunt(self._dragon_minutes.value() * 60)

    def _on_new_dragon(self) -> None:
        self._controller.new_dragon_hunt()
        self._dragon_input.clear()

    def _on_add_treasure(self) -> None:
        self._controller.add_treasure(self._treasure_input.text())
        self._treasure_input.clear()

    def _selected_treasure_id(self) -> str | None:
        item = self._treasure_list.currentItem()
        return item.data(Qt.ItemDataRole.UserRole) if item is not None else None

    def _on_hunt_treasure(self) -> None:
        treasure_id = self._selected_treasure_id()
        if treasure_id is not None:
            self._controller.begin_treasure_hunt(
                treasure_id, self._treasure_minutes.value() * 60,
            )

    def _on_delete_treasure(self) -> None:
        treasure_id = self._selected_treasure_id()
        if treasure_id is not None:
            self._controller.delete_treasure(treasure_id)

    def _on_sound_selected(self, index: int) -> None:
        self._ambient.play(self._sound_combo.itemData(index))

    def _on_celebrated(self, headline: str, caption: str) -> None:
        self._speech.setText(headline)
        self.statusBar().showMessage(caption, 3000)

    # ── refresh ───────────────────────────────────────────────────────────

    def _refresh(self) -> None:
        snap = self._controller.snapshot()

        self._mode_label.setText(MODE_LABELS[snap.mode])
        self._clock.setText(snap.clock)
        self._progress.setValue(round(snap.progress * _PROGRESS_STEPS))

        running = snap.state == TimerState.RUNNING
        self._start_pause_btn.setText("Pause" if running else "Start")
        self._start_pause_btn.setEnabled(snap.state != TimerState.COMPLETED)
        for mode, btn in self._mode_buttons.items():
            btn.setChecked(mode == snap.mode)

        # ── dragon ───────────────────────────────────────────────────
        dragon = snap.dragon
        if dragon.description and self._dragon_input.text().strip() != dragon.description:
            self._dragon_input.setText(dragon.description)
        self._dragon_input.setEnabled(not dragon.is_active and not dragon.is_completed)
        self._hunt_dragon_btn.setVisible(not dragon.is_active and not dragon.is_completed)
        self._slay_btn.setVisible(dragon.is_active)
        self._retreat_btn.setVisible(dragon.is_active)
        self._new_dragon_btn.setVisible(dragon.is_completed)
        if dragon.is_completed:
            plural = "" if dragon.sessions_spent == 1 else "s"
            self._dragon_info.setText(
                f"Dragon slain! Defeated in {dragon.sessions_spent} battle session{plural}"
            )
        elif dragon.is_active:
            self._dragon_info.setText(
                f"Session {dragon.sessions_spent + 1} • Fighting: {dragon.description}"
            )
        else:
            self._dragon_info.clear()

        # ── treasures ────────────────────────────────────────────────
        selected = self._selected_treasure_id()
        self._treasure_list.clear()
        active_id = snap.active_treasure.id if snap.active_treasure else None
        for treasure in snap.active_treasures + snap.completed_treasures:
            marker = "✓ " if treasure.is_completed else ("➤ " if treasure.id == active_id else "")
            item = QListWidgetItem(f"{marker}{treasure.name}")
            item.setData(Qt.ItemDataRole.UserRole, treasure.id)
            if treasure.is_completed:
                item.setFlags(item.flags() & ~Qt.ItemFlag.ItemIsSelectable)
            self._treasure_list.addItem(item)
            if treasure.id == selected:
                self._treasure_list.setCurrentItem(item)
        self._collect_btn.setEnabled(snap.active_treasure is not None)
        self._abandon_btn.setEnabled(snap.active_treasure is not None)

        self._stats.setText(
            f"Focus spells cast: {snap.cycles}   "
            f"Treasures collected: {snap.treasures_collected}   "
            f"Dragon status: {snap.dragon_status}"
        )
