import logging
import math
from typing import Dict, List, Sequence, Tuple

import pygame

from maze_stepper.core.events import RunListener
from maze_stepper.core.grid import Grid
from maze_stepper.core.run import RunController, RunHandle
from maze_stepper.core.topology import Topology

logger = logging.getLogger(__name__)

# Distance between hex row centres when neighbouring centres are 1 apart
HEX_ROW_SPACING = math.sqrt(3) / 2


def cell_center(topology: Topology, x: int, y: int) -> Tuple[float, float]:
    """
    World position of a cell centre, y pointing up.
    Hex rows are columns of flat-topped hexes; odd rows sit half a cell higher,
    which is the layout the projection table describes (N is +x, rows advance NE/SE).
    """
    if topology.degree == 6:
        return y * HEX_ROW_SPACING, x + 0.5 * (y % 2)
    return float(x), float(y)


def cell_shape(topology: Topology, parity: int) -> List[Tuple[Tuple[float, float], Tuple[float, float]]]:
    """
    Wall segments of a cell relative to its centre, one per direction.
    Each wall is perpendicular to the line joining the two centres, halfway along it.
    """
    half_len = 0.5 * math.tan(math.pi / topology.degree)
    cx, cy = cell_center(topology, 0, parity)
    walls = []
    for d in topology.directions():
        nx, ny = cell_center(topology, *topology.project(0, parity, d))
        vx, vy = nx - cx, ny - cy
        length = math.hypot(vx, vy)
        vx, vy = vx / length, vy / length
        mx, my = vx * 0.5, vy * 0.5
        px, py = -vy * half_len, vx * half_len
        walls.append(((mx - px, my - py), (mx + px, my + py)))
    return walls


class Renderer(RunListener):
    COLOR_BG = (10, 10, 10)
    COLOR_WALL = (200, 200, 200)
    COLOR_VISITED = (60, 100, 160)  # Blue tint
    COLOR_CHANGED = (230, 120, 60)
    COLOR_TRAIL = (255, 215, 0)  # Gold
    COLOR_START = (60, 200, 90)
    COLOR_END = (220, 60, 60)

    HIGHLIGHT_FRAMES = 12

    def __init__(self, grid: Grid, width=1280, height=720, record=False):
        self.grid = grid
        self.screen_width = width
        self.screen_height = height
        self.controller = RunController(listener=self)
        self.handle: RunHandle = None
        self.start = None
        self.end = None

        # Camera
        self.cell_size = 20.0  # Pixels per world unit
        self.offset_x = 0.0
        self.offset_y = 0.0
        self.zoom_speed = 1.1

        self._shapes = [cell_shape(grid.topology, parity) for parity in (0, 1)]

        # Run feedback
        self.highlights: Dict[Tuple[int, int], int] = {}
        self.trail: List[Tuple[int, int]] = []
        self.trail_shown = 0
        self._trail_last = 0.0

        from maze_stepper.viz.recorder import VideoRecorder
        self.recorder = VideoRecorder(active=record)

        self.font = None
        self.running = True
        self.clock = None
        self.surface = None
        self.gen_finished = False

    # RunListener

    def on_cell_changed(self, coord):
        self.highlights[tuple(coord)] = self.HIGHLIGHT_FRAMES

    def on_target_first_reached(self, coords: Sequence[Tuple[int, int]]):
        self.trail = list(coords)
        self.trail_shown = 0
        self._trail_last = 0.0

    def on_run_complete(self):
        self.gen_finished = True
        logger.info("Renderer: run finished (%s)", self.handle.state.value if self.handle else "none")

    # Run control

    def start_run(self, start, end, seed=None, wait_time=None) -> RunHandle:
        self.start, self.end = tuple(start), tuple(end)
        self.gen_finished = False
        self.trail = []
        self.highlights.clear()
        kwargs = {} if wait_time is None else {"wait_time": wait_time}
        self.handle = self.controller.start_run(self.grid, start, end, seed=seed, **kwargs)
        return self.handle

    def advance_trail(self, now: float):
        # One trail element per wait-time interval, same cadence as carving
        if not self.trail or self.trail_shown >= len(self.trail):
            return
        wait = self.handle.wait_time if self.handle else 0.0
        if now - self._trail_last >= wait:
            self.trail_shown += 1
            self._trail_last = now

    # Camera

    def world_bounds(self):
        xs, ys = [], []
        for x, y in ((0, 0), (self.grid.width - 1, 0), (0, self.grid.height - 1),
                     (self.grid.width - 1, self.grid.height - 1), (0, 1), (self.grid.width - 1, 1)):
            if self.grid.in_bounds(x, y):
                wx, wy = cell_center(self.grid.topology, x, y)
                xs.append(wx)
                ys.append(wy)
        return min(xs) - 0.6, min(ys) - 0.6, max(xs) + 0.6, max(ys) + 0.6

    def fit_to_screen(self):
        """Auto-adjust zoom and pan to fit the entire grid on screen with padding."""
        padding = 40
        min_x, min_y, max_x, max_y = self.world_bounds()
        available_w = self.screen_width - (padding * 2)
        available_h = self.screen_height - (padding * 2)

        self.cell_size = min(available_w / (max_x - min_x), available_h / (max_y - min_y))

        # Center
        self.offset_x = (self.screen_width - (max_x - min_x) * self.cell_size) / 2 - min_x * self.cell_size
        self.offset_y = (self.screen_height + (max_y - min_y) * self.cell_size) / 2 + min_y * self.cell_size

    def world_to_screen(self, wx, wy):
        return wx * self.cell_size + self.offset_x, self.offset_y - wy * self.cell_size

    def init_window(self):
        pygame.init()
        pygame.display.set_caption(
            f"Maze Stepper - {self.grid.width}x{self.grid.height} {self.grid.topology.name}")
        self.surface = pygame.display.set_mode((self.screen_width, self.screen_height), pygame.RESIZABLE)
        self.clock = pygame.time.Clock()
        self.font = pygame.font.SysFont("Consolas", 16)

        # Initial fit
        self.fit_to_screen()

    def handle_input(self):
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.running = False

            elif event.type == pygame.VIDEORESIZE:
                self.screen_width, self.screen_height = event.w, event.h

            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    self.running = False
                elif event.key == pygame.K_SPACE and self.handle:
                    self.handle.cancel()
                elif event.key in (pygame.K_PLUS, pygame.K_EQUALS, pygame.K_KP_PLUS) and self.handle:
                    # Faster
                    self.handle.adjust_wait_time(self.handle.wait_time / 1.5)
                elif event.key in (pygame.K_MINUS, pygame.K_KP_MINUS) and self.handle:
                    self.handle.adjust_wait_time(self.handle.wait_time * 1.5)
                elif event.key == pygame.K_f:
                    self.fit_to_screen()

            elif event.type == pygame.MOUSEWHEEL:
                # Zoom towards mouse
                mx, my = pygame.mouse.get_pos()
                wx = (mx - self.offset_x) / self.cell_size
                wy = (self.offset_y - my) / self.cell_size

                if event.y > 0:
                    self.cell_size *= self.zoom_speed
                else:
                    self.cell_size /= self.zoom_speed
                self.cell_size = max(1.0, min(200.0, self.cell_size))

                # Keep mouse at same world coord
                self.offset_x = mx - wx * self.cell_size
                self.offset_y = my + wy * self.cell_size

            elif event.type == pygame.MOUSEMOTION:
                if pygame.mouse.get_pressed()[0] or pygame.mouse.get_pressed()[2]:
                    self.offset_x += event.rel[0]
                    self.offset_y += event.rel[1]

    def _polygon(self, x, y):
        wx, wy = cell_center(self.grid.topology, x, y)
        return [self.world_to_screen(wx + ax, wy + ay) for (ax, ay), _ in self._shapes[y % 2]]

    def draw_grid(self):
        self.surface.fill(self.COLOR_BG)
        topology = self.grid.topology

        # 1. Cell backgrounds
        for x, y in self.grid:
            mask = self.grid.openings[y * self.grid.width + x]
            color = None
            if (x, y) in self.highlights:
                color = self.COLOR_CHANGED
            elif mask:
                color = self.COLOR_VISITED
            if color:
                pygame.draw.polygon(self.surface, color, self._polygon(x, y))

        for coord, color in ((self.start, self.COLOR_START), (self.end, self.COLOR_END)):
            if coord:
                pygame.draw.polygon(self.surface, color, self._polygon(*coord))

        # 2. Trail
        for x, y in self.trail[:self.trail_shown]:
            pygame.draw.polygon(self.surface, self.COLOR_TRAIL, self._polygon(x, y))

        # 3. Walls, where there is no opening
        if self.cell_size > 3.0:
            for x, y in self.grid:
                mask = self.grid.openings[y * self.grid.width + x]
                wx, wy = cell_center(topology, x, y)
                for d, ((ax, ay), (bx, by)) in enumerate(self._shapes[y % 2]):
                    if mask & (1 << d):
                        continue
                    pygame.draw.line(self.surface, self.COLOR_WALL,
                                     self.world_to_screen(wx + ax, wy + ay),
                                     self.world_to_screen(wx + bx, wy + by), 1)

        # Fade highlights
        for coord in list(self.highlights):
            self.highlights[coord] -= 1
            if self.highlights[coord] <= 0:
                del self.highlights[coord]

    def draw_hud(self):
        fps = int(self.clock.get_fps())
        rec_status = "REC" if self.recorder.active else ""
        status = "Done" if self.gen_finished else "Running"
        wait = self.handle.wait_time if self.handle else 0.0
        steps = self.handle.step_count if self.handle else 0
        info = [
            f"FPS: {fps}",
            f"Size: {self.grid.width}x{self.grid.height} ({self.grid.topology.name})",
            f"Steps: {steps:,}",
            f"Wait: {wait * 1000:.0f} ms  (+/- to change, space to cancel)",
            f"Status: {status}",
            rec_status
        ]

        for i, text in enumerate(info):
            lbl = self.font.render(text, True, (255, 255, 255))
            self.surface.blit(lbl, (10, 10 + i * 20))

    def run_loop(self):
        while self.running:
            self.handle_input()

            self.controller.tick()
            self.advance_trail(pygame.time.get_ticks() / 1000.0)

            self.draw_grid()
            self.draw_hud()
            pygame.display.flip()

            if self.recorder.active:
                self.recorder.capture_frame(self.surface)

            self.clock.tick(60)

        # Window closed mid-run
        if self.handle and self.handle.is_active:
            self.handle.cancel()

        self.recorder.stop()
        pygame.quit()
