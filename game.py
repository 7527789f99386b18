import pygame

from catcher import GameSession, ItemKind, SessionOptions
from catcher.config import BASKET_Y, FRAME_RATE, PLAYFIELD_HEIGHT, PLAYFIELD_WIDTH
from catcher.models import describe_event

# 常量定义
BACKGROUND = (240, 248, 255)
BASKET_COLOR = (160, 110, 50)
ITEM_COLORS = {ItemKind.GOOD: (220, 40, 40), ItemKind.HAZARD: (30, 30, 30)}
ITEM_RADIUS = 22

# Keyboard stand-in for the pose classifier: each key yields a raw label.
KEY_LABELS = {
    pygame.K_LEFT: "Left",
    pygame.K_a: "Left",
    pygame.K_DOWN: "Center",
    pygame.K_s: "Center",
    pygame.K_RIGHT: "Right",
    pygame.K_d: "Right",
}


class PygameTimer:
    def __init__(self, scheduler, callback):
        self.scheduler = scheduler
        self.callback = callback

    def cancel(self):
        # Only the timer currently installed may switch the event off.
        if self.scheduler.callback is self.callback:
            pygame.time.set_timer(self.scheduler.event_type, 0)
            self.scheduler.callback = None


class PygameScheduler:
    """Countdown delivered as a pygame user event.

    A single event type is reserved up front and reused by every timer, so
    restarting the game does not use up pygame's pool of custom events.
    Only one timer is live at a time.
    """

    def __init__(self):
        self.event_type = pygame.event.custom_type()
        self.callback = None

    def call_every(self, interval, callback):
        self.callback = callback
        pygame.time.set_timer(self.event_type, int(interval * 1000))
        return PygameTimer(self, callback)

    def dispatch(self, event):
        if event.type != self.event_type:
            return False
        if self.callback:
            self.callback()
        return True


class Game:
    def __init__(self, time_limit=60):
        pygame.init()
        self.screen = pygame.display.set_mode((PLAYFIELD_WIDTH, PLAYFIELD_HEIGHT))
        pygame.display.set_caption("Fruit Catcher")
        self.clock = pygame.time.Clock()
        self.font = pygame.font.Font(None, 26)
        self.big_font = pygame.font.Font(None, 64)
        self.options = SessionOptions(time_limit=time_limit)
        self.scheduler = PygameScheduler()
        self.final_result = None
        self.session = GameSession(scheduler=self.scheduler, on_game_end=self.on_game_end)

    def on_game_end(self, score, level):
        self.final_result = (score, level)
        print(f"[Session] Game over. Score={score}, level={level}")

    def run(self):
        self.session.start(self.options)
        running = True
        while running:
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif not self.scheduler.dispatch(event):
                    self.handle_input(event)

            self.step()
            pygame.display.flip()
            self.clock.tick(FRAME_RATE)
        self.session.stop()

    def step(self):
        """Advance one frame, echo the session's event log and draw."""
        self.session.tick()
        snapshot = self.session.snapshot()
        for event in snapshot.events:
            print(f"[Frame {event['frame']:>5}] {describe_event(event)}")
        self.render(snapshot)
        return snapshot

    def handle_input(self, event):
        if event.type != pygame.KEYDOWN:
            return
        if event.key == pygame.K_SPACE:
            self.final_result = None
            self.session.start(self.options)
        elif event.key == pygame.K_ESCAPE:
            self.session.stop()
        elif event.key in KEY_LABELS and self.session.active:
            self.session.on_position_command(KEY_LABELS[event.key])

    def render(self, snapshot):
        self.screen.fill(BACKGROUND)

        basket = pygame.Rect(0, 0, 90, 40)
        basket.center = (snapshot.catcher_zone.x, BASKET_Y)
        pygame.draw.rect(self.screen, BASKET_COLOR, basket, border_radius=8)

        for item in snapshot.items:
            pygame.draw.circle(self.screen, ITEM_COLORS[item.kind], (item.x, int(item.y)), ITEM_RADIUS)

        pygame.draw.rect(self.screen, (255, 255, 255), (0, 0, 150, 80))
        for row, text in enumerate((
            f"Score: {snapshot.score}",
            f"Time: {snapshot.remaining_time}",
            f"Level: {snapshot.level}",
        )):
            self.screen.blit(self.font.render(text, True, (0, 0, 0)), (10, 5 + row * 25))

        if not snapshot.active:
            message = "Game Over" if self.final_result else "Stopped"
            surface = self.big_font.render(message, True, (200, 30, 30))
            self.screen.blit(surface, surface.get_rect(center=(PLAYFIELD_WIDTH // 2, PLAYFIELD_HEIGHT // 2)))
            hint = self.font.render("SPACE to play again", True, (60, 60, 60))
            self.screen.blit(hint, hint.get_rect(center=(PLAYFIELD_WIDTH // 2, PLAYFIELD_HEIGHT // 2 + 50)))

def main():
    game = Game()
    game.run()
    pygame.quit()

if __name__ == "__main__":
    main()
