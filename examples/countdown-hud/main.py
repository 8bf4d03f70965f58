"""
tick-countdown HUD
Round timer demo: a pausable countdown with interval tasks driving on-screen flashes.
"""

import logging
import sys
import threading

import pygame

from tick_countdown import FINISHED, TICK, AlreadyRunningError, CountdownState, make_countdown

# --- Configuration ---
WIDTH, HEIGHT = 640, 360
FPS = 60
TITLE = "tick-countdown HUD"

ROUND_SECONDS = 30
WAVE_INTERVAL = 10
WARNING_INTERVAL = 1
WARNING_THRESHOLD = 5
FLASH_FRAMES = 20

# Colors
BG_COLOR = (26, 26, 46)
HUD_COLOR = (200, 200, 220)
TIME_COLOR = (0, 255, 200)
PAUSED_COLOR = (255, 215, 0)
WARNING_COLOR = (255, 100, 100)
WAVE_COLOR = (180, 100, 255)
BAR_BG = (60, 60, 80)


class HudState:
    """Shared between the pygame loop and countdown callbacks."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self.seconds_left = ROUND_SECONDS
        self.finished = False
        self.wave = 0
        self.wave_flash = 0
        self.warning_flash = 0

    def on_tick(self, signal_name: str, data: dict) -> None:
        with self._lock:
            self.seconds_left = data["seconds_left"]

    def on_finished(self, signal_name: str, data: dict) -> None:
        with self._lock:
            self.finished = True

    def on_wave(self, seconds_left: int, label: str) -> None:
        with self._lock:
            self.wave += 1
            self.wave_flash = FLASH_FRAMES
        logging.getLogger(__name__).info("%s %d at %ds left", label, self.wave, seconds_left)

    def on_warning(self, seconds_left: int) -> None:
        if seconds_left > WARNING_THRESHOLD:
            return
        with self._lock:
            self.warning_flash = FLASH_FRAMES

    def frame(self) -> tuple[int, bool, int, int, int]:
        with self._lock:
            view = (self.seconds_left, self.finished, self.wave, self.wave_flash, self.warning_flash)
            self.wave_flash = max(0, self.wave_flash - 1)
            self.warning_flash = max(0, self.warning_flash - 1)
        return view

    def reset(self) -> None:
        with self._lock:
            self.seconds_left = ROUND_SECONDS
            self.finished = False
            self.wave = 0


def _build_countdown(state: HudState):
    countdown = make_countdown(ROUND_SECONDS)
    countdown.subscribe(TICK, state.on_tick)
    countdown.subscribe(FINISHED, state.on_finished)
    countdown.add_task(WAVE_INTERVAL, state.on_wave, "wave")
    countdown.add_task(WARNING_INTERVAL, state.on_warning)
    return countdown


def main():
    logging.basicConfig(level=logging.INFO)
    pygame.init()
    screen = pygame.display.set_mode((WIDTH, HEIGHT))
    pygame.display.set_caption(TITLE)
    pg_clock = pygame.time.Clock()
    font = pygame.font.SysFont("monospace", 14)
    big_font = pygame.font.SysFont("monospace", 96, bold=True)

    state = HudState()
    countdown = _build_countdown(state)
    countdown.start()

    running = True
    while running:
        pg_clock.tick(FPS)

        # --- Events ---
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                running = False
            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    running = False
                elif event.key == pygame.K_SPACE:
                    current = countdown.state
                    if current is CountdownState.PAUSED:
                        countdown.resume()
                    elif current is CountdownState.RUNNING:
                        countdown.pause()
                elif event.key == pygame.K_r:
                    countdown.destroy()
                    state.reset()
                    countdown = _build_countdown(state)
                    countdown.start()
                elif event.key == pygame.K_s:
                    try:
                        countdown.start()
                    except AlreadyRunningError:
                        pass
                    else:
                        state.reset()

        # --- Draw ---
        seconds_left, finished, wave, wave_flash, warning_flash = state.frame()
        screen.fill(WAVE_COLOR if wave_flash % 10 > 5 else BG_COLOR)

        if finished:
            color = WARNING_COLOR
        elif countdown.is_paused():
            color = PAUSED_COLOR
        elif warning_flash:
            color = WARNING_COLOR
        else:
            color = TIME_COLOR
        minutes, seconds = divmod(seconds_left, 60)
        surf = big_font.render(f"{minutes:02d}:{seconds:02d}", True, color)
        screen.blit(surf, surf.get_rect(center=(WIDTH // 2, HEIGHT // 2 - 20)))

        bar = pygame.Rect(60, HEIGHT // 2 + 60, WIDTH - 120, 12)
        pygame.draw.rect(screen, BAR_BG, bar)
        fill_w = int(bar.width * seconds_left / countdown.duration)
        pygame.draw.rect(screen, color, (bar.x, bar.y, fill_w, bar.height))

        status = "FINISHED" if finished else countdown.state.value.upper()
        hud_lines = [
            f"State: {status}   Wave: {wave}   FPS: {pg_clock.get_fps():.0f}",
            "Space=Pause/Resume  S=Start again  R=New round  Esc=Quit",
        ]
        for i, line in enumerate(hud_lines):
            surf = font.render(line, True, HUD_COLOR)
            screen.blit(surf, (10, 8 + i * 20))

        pygame.display.flip()

    countdown.destroy()
    pygame.quit()
    sys.exit()


if __name__ == "__main__":
    main()
