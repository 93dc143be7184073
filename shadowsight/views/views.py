from pathlib import Path

import wx

from ..audio.player import MixerAudioPlayer, NullAudioPlayer
from ..config.settings import Settings, get_settings, load_settings, set_settings
from ..controllers.session_controller import SessionController
from ..exceptions import AudioError, SettingsError
from ..logging_config import get_logger, setup_logging
from ..models.ads import LoggingAdProvider
from ..models.board_state import BoardState
from ..models.opponent import RandomOpponent
from ..models.progression import ProgressionStore
from ..models.session_state import GameOutcome
from ..models.storage import JsonFileStore

logger = get_logger(__name__)

SETTINGS_FILE = Path.home() / ".shadowsight" / "settings.json"

LIGHT_SQUARE = (240, 217, 181)
DARK_SQUARE = (181, 136, 99)
LAST_MOVE_TINT = (205, 210, 106)
SELECTED_OUTLINE = (0, 128, 255)


class WxScheduler:
    """Scheduler backed by wx.CallLater, so callbacks run on the GUI thread."""

    def __init__(self):
        self._pending: list[wx.CallLater] = []

    def call_later(self, delay_ms: int, callback) -> None:
        # keep a reference until the timer has fired
        self._pending = [t for t in self._pending if t.IsRunning()]
        self._pending.append(wx.CallLater(max(delay_ms, 1), callback))


class BoardPanel(wx.Panel):
    """
    Panel that paints the cells sent by the controller and turns clicks
    into square activations.
    """

    def __init__(self, parent, controller: SessionController, settings: Settings):
        size = settings.ui.board_size
        super().__init__(parent, size=wx.Size(size, size))
        self.SetMinSize(wx.Size(size, size))
        self.controller = controller
        self.square_size = settings.ui.square_size
        self.piece_unicode = settings.ui.piece_unicode
        self.cells = []

        self.SetName("Chess board")
        self.SetBackgroundStyle(wx.BG_STYLE_PAINT)

        controller.board_updated.connect(self.on_board_updated)

        self.Bind(wx.EVT_PAINT, self.on_paint)
        self.Bind(wx.EVT_LEFT_DOWN, self.on_left_down)

    def on_board_updated(self, sender, cells):
        self.cells = cells
        self.Refresh()

    def on_left_down(self, event):
        col = event.GetX() // self.square_size
        row = event.GetY() // self.square_size
        if 0 <= row < 8 and 0 <= col < 8 and self.cells:
            self.controller.handle_square_activated(self.cells[row * 8 + col].square)

    def on_paint(self, event):
        dc = wx.AutoBufferedPaintDC(self)
        size = self.square_size
        font = wx.Font(
            int(size * 0.55),
            wx.FONTFAMILY_SWISS,
            wx.FONTSTYLE_NORMAL,
            wx.FONTWEIGHT_NORMAL,
        )
        dc.SetFont(font)

        for index, cell in enumerate(self.cells):
            x = (index % 8) * size
            y = (index // 8) * size

            color = LIGHT_SQUARE if cell.is_light else DARK_SQUARE
            if cell.is_last_move:
                color = LAST_MOVE_TINT
            dc.SetBrush(wx.Brush(wx.Colour(*color)))
            dc.SetPen(wx.Pen(wx.Colour(*color)))
            dc.DrawRectangle(x, y, size, size)

            if cell.is_selected:
                dc.SetBrush(wx.TRANSPARENT_BRUSH)
                dc.SetPen(wx.Pen(wx.Colour(*SELECTED_OUTLINE), 3))
                dc.DrawRectangle(x + 2, y + 2, size - 4, size - 4)

            if cell.piece:
                glyph = self.piece_unicode[cell.piece.symbol()]
                w, h = dc.GetTextExtent(glyph)
                dc.DrawText(glyph, x + (size - w) // 2, y + (size - h) // 2)


class RankPanel(wx.Panel):
    """Rank name, progress to the next rank and rating."""

    def __init__(self, parent, controller: SessionController):
        super().__init__(parent)
        self.rank_name = wx.StaticText(self, label="")
        self.progress = wx.Gauge(self, range=100, size=wx.Size(160, 12))
        self.rating = wx.StaticText(self, label="")

        sizer = wx.BoxSizer(wx.HORIZONTAL)
        sizer.Add(self.rank_name, 0, wx.ALIGN_CENTER_VERTICAL | wx.ALL, 5)
        sizer.Add(self.progress, 1, wx.ALIGN_CENTER_VERTICAL | wx.ALL, 5)
        sizer.Add(self.rating, 0, wx.ALIGN_CENTER_VERTICAL | wx.ALL, 5)
        self.SetSizer(sizer)

        controller.progression_changed.connect(self.on_progression_changed)

    def on_progression_changed(self, sender, record, rank):
        self.rank_name.SetLabel(rank.name)
        self.progress.SetValue(int(rank.progress_percent))
        self.rating.SetLabel(f"Elo {record.rating}")
        self.Layout()


class SplashPanel(wx.Panel):
    """Title screen with the saved rating and streak and a start button."""

    def __init__(self, parent, controller: SessionController):
        super().__init__(parent)
        title = wx.StaticText(self, label="Shadow Sight Chess")
        title.SetFont(title.GetFont().Scaled(2.0).Bold())
        record = controller.progression.record
        stats = wx.StaticText(
            self, label=f"Elo {record.rating}    Streak {record.streak}"
        )
        self.start_button = wx.Button(self, label="Start")
        self.start_button.Bind(wx.EVT_BUTTON, lambda e: controller.start_session())

        sizer = wx.BoxSizer(wx.VERTICAL)
        sizer.AddStretchSpacer()
        sizer.Add(title, 0, wx.ALIGN_CENTER | wx.ALL, 10)
        sizer.Add(stats, 0, wx.ALIGN_CENTER | wx.ALL, 5)
        sizer.Add(self.start_button, 0, wx.ALIGN_CENTER | wx.ALL, 10)
        sizer.AddStretchSpacer()
        self.SetSizer(sizer)


class ResultDialog(wx.Dialog):
    """End-of-game modal offering another game."""

    def __init__(self, parent, controller: SessionController):
        super().__init__(parent, title="Game over")
        self.headline = wx.StaticText(self, label="")
        self.headline.SetFont(self.headline.GetFont().Scaled(1.5).Bold())
        self.details = wx.StaticText(self, label="")
        again = wx.Button(self, label="Play again")
        again.Bind(wx.EVT_BUTTON, lambda e: controller.reset_session())
        self.Bind(wx.EVT_CLOSE, lambda e: self.Hide())

        sizer = wx.BoxSizer(wx.VERTICAL)
        sizer.Add(self.headline, 0, wx.ALIGN_CENTER | wx.ALL, 10)
        sizer.Add(self.details, 0, wx.ALIGN_CENTER | wx.ALL, 5)
        sizer.Add(again, 0, wx.ALIGN_CENTER | wx.ALL, 10)
        self.SetSizerAndFit(sizer)

    def show_result(self, outcome: GameOutcome, reason: str, record, rank):
        self.headline.SetLabel(outcome.headline)
        self.details.SetLabel(
            f"{reason}\n{rank.name}: Elo {record.rating}, streak {record.streak}"
        )
        self.Fit()
        self.CentreOnParent()
        self.Show()


class ShadowSightFrame(wx.Frame):
    """
    Main application window. Shows the splash screen first, then the rank
    bar and board; the result dialog appears when a game ends.
    """

    def __init__(self, controller: SessionController, settings: Settings):
        super().__init__(None, title="Shadow Sight Chess")
        self.controller = controller

        self.splash = SplashPanel(self, controller)
        self.rank_panel = RankPanel(self, controller)
        self.board_panel = BoardPanel(self, controller, settings)
        self.result_dialog = ResultDialog(self, controller)
        self.status = self.CreateStatusBar()

        sizer = wx.BoxSizer(wx.VERTICAL)
        sizer.Add(self.splash, 1, wx.EXPAND)
        sizer.Add(self.rank_panel, 0, wx.EXPAND)
        sizer.Add(self.board_panel, 0, wx.ALIGN_CENTER | wx.ALL, 8)
        self.SetSizer(sizer)

        self.rank_panel.Hide()
        self.board_panel.Hide()
        self.SetClientSize(
            wx.Size(settings.ui.board_size + 16, settings.ui.board_size + 60)
        )

        controller.overlays_hidden.connect(self.on_overlays_hidden)
        controller.modal_requested.connect(self.on_modal_requested)
        controller.game_over.connect(self.on_game_over)
        controller.phase_changed.connect(self.on_phase_changed)

        self.Show()

    def on_overlays_hidden(self, sender):
        self.splash.Hide()
        self.result_dialog.Hide()
        self.rank_panel.Show()
        self.board_panel.Show()
        self.Layout()

    def on_modal_requested(self, sender, outcome, reason, record, rank):
        self.result_dialog.show_result(outcome, reason, record, rank)

    def on_game_over(self, sender, outcome, reason, record):
        self.status.SetStatusText(f"Game over: {reason}")

    def on_phase_changed(self, sender, phase):
        self.status.SetStatusText(phase.replace("_", " ").capitalize())


def _load_app_settings() -> Settings:
    """Load settings from the user's settings file, falling back to defaults."""
    try:
        settings = load_settings(SETTINGS_FILE)
        logger.info(f"Settings loaded from {SETTINGS_FILE}")
    except SettingsError as e:
        logger.warning(f"Using default settings: {e}")
        settings = Settings.default()
    set_settings(settings)
    return get_settings()


def _create_audio(settings: Settings):
    if not settings.audio.enabled:
        return NullAudioPlayer()
    try:
        return MixerAudioPlayer(settings.audio.sample_rate, settings.audio.volume)
    except AudioError as e:
        logger.warning(f"Audio unavailable, continuing muted: {e}")
        return NullAudioPlayer()


def main():
    setup_logging(log_level="INFO", console_output=True)
    logger.info("Starting Shadow Sight")

    settings = _load_app_settings()

    progression = ProgressionStore(
        JsonFileStore(settings.storage.data_file),
        rating_key=settings.storage.rating_key,
        streak_key=settings.storage.streak_key,
    )
    progression.load()

    app = wx.App(False)
    controller = SessionController(
        rules=BoardState(),
        progression=progression,
        opponent=RandomOpponent(),
        audio=_create_audio(settings),
        scheduler=WxScheduler(),
        ads=LoggingAdProvider(),
        settings=settings.game,
    )
    ShadowSightFrame(controller, settings)
    logger.info("Starting main event loop")
    app.MainLoop()

    logger.info("Shadow Sight shutdown complete")


if __name__ == "__main__":
    main()
