# main.py
# pygame 창: 파이프 뷰 + 속도 분포 + Moody 선도/대시보드 사이드바

import logging

import pygame

import config
from moody.diagram import MoodyDiagram
from moody.render import draw_velocity_profile
from moody.simulation import MoodyExplorer

logger = logging.getLogger(__name__)

CURSORS = {
    "default": pygame.SYSTEM_CURSOR_ARROW,
    "grab": pygame.SYSTEM_CURSOR_HAND,
    "grabbing": pygame.SYSTEM_CURSOR_HAND,
    "pointer": pygame.SYSTEM_CURSOR_HAND,
    "se-resize": pygame.SYSTEM_CURSOR_SIZENWSE,
}

CATEGORY_KEYS = {
    pygame.K_F1: "infoBox",
    pygame.K_F2: "layerLabels",
    pygame.K_F3: "gauges",
    pygame.K_F4: "contextual",
}

MODEL_KEYS = {pygame.K_c: "colebrook", pygame.K_i: "igt", pygame.K_g: "aga"}

PRESET_KEYS = {pygame.K_1: "laminar", pygame.K_2: "partially-turbulent", pygame.K_3: "fully-turbulent"}


MIN_SIZE = (
    config.Screen.MIN_VIEW + config.Screen.PROFILE + config.Screen.SIDEBAR,
    config.Screen.MIN_VIEW + config.Screen.HUD,
)


def window_size(w, h):
    """최소 창 크기로 올림"""
    return max(int(w), MIN_SIZE[0]), max(int(h), MIN_SIZE[1])


def layout(W, H):
    """(파이프 뷰, 속도 분포, 사이드바, HUD) 영역, W x H 는 window_size 를 거친 값"""
    view_w = W - config.Screen.SIDEBAR - config.Screen.PROFILE
    view_h = H - config.Screen.HUD
    pipe = pygame.Rect(0, 0, view_w, view_h)
    profile = pygame.Rect(view_w, 0, config.Screen.PROFILE, view_h)
    sidebar = pygame.Rect(view_w + config.Screen.PROFILE, 0, config.Screen.SIDEBAR, H)
    hud = pygame.Rect(0, view_h, view_w + config.Screen.PROFILE, H - view_h)
    return pipe, profile, sidebar, hud


def draw_text(screen, font, x, y, s, color=config.Color.TEXT):
    surf = font.render(s, True, color)
    screen.blit(surf, (x, y))
    return y + surf.get_height() + 2


def wrap(font, text, width):
    words = text.split()
    lines, line = [], ""
    for w in words:
        trial = f"{line} {w}".strip()
        if font.size(trial)[0] > width and line:
            lines.append(line)
            line = w
        else:
            line = trial
    if line:
        lines.append(line)
    return lines


def draw_contribution(screen, font, x, y, width, contribution):
    """점성/조도 기여율 막대"""
    visc_w = int(width * contribution.viscosity / 100.0)
    pygame.draw.rect(screen, config.Color.SUBLAYER, (x, y, visc_w, 14))
    pygame.draw.rect(screen, config.Color.ACCENT, (x + visc_w, y, width - visc_w, 14))
    y += 18
    return draw_text(screen, font, x, y,
                     f"Viscosity {contribution.viscosity:.0f}%   Roughness {contribution.roughness:.0f}%")


def draw_dashboard(screen, font, font_bold, rect, explorer, pipe_name):
    s = explorer.state
    flow = explorer.flow
    pygame.draw.rect(screen, config.Color.PANEL, rect)
    x, y = rect.x + 12, rect.y + 10

    y = draw_text(screen, font_bold, x, y, flow.regime.title, config.Color.ACCENT)
    for line in wrap(font, flow.regime.text, rect.width - 24):
        y = draw_text(screen, font, x, y, line)
    y += 6

    y = draw_text(screen, font, x, y, f"Re = {flow.reynolds:,.0f}  (target {s.target_re:,.0f})")
    y = draw_text(screen, font, x, y, f"Diameter = {s.diameter:.3f} in  {pipe_name}")
    y = draw_text(screen, font, x, y, f"Roughness ε = {s.abs_roughness:.4f} in")
    y = draw_text(screen, font, x, y, f"ε/D = {s.relative_roughness:.6f}  (curve {flow.curve.label})")
    y += 6

    if not explorer.results:
        y = draw_text(screen, font, x, y, "No active model")
    for res in explorer.results:
        y = draw_text(screen, font_bold, x, y,
                      f"{res.name:<10} Fanning {res.friction:.5f}   Darcy {res.darcy:.5f}", res.color)
    y += 6
    draw_contribution(screen, font, x, y, rect.width - 24, flow.contribution)


def main():
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    pygame.init()
    W, H = config.Screen.WIDTH, config.Screen.HEIGHT
    screen = pygame.display.set_mode((W, H), pygame.RESIZABLE)
    pygame.display.set_caption(config.Screen.TITLE)

    clock = pygame.time.Clock()
    font = pygame.font.SysFont("consolas", 16)
    font_bold = pygame.font.SysFont("consolas", 17, bold=True)

    pipe_rect, profile_rect, sidebar_rect, hud_rect = layout(W, H)
    explorer = MoodyExplorer(pipe_rect.width, pipe_rect.height)
    diagram = MoodyDiagram()
    pipe_name = '4"'

    fullscreen_pending_until = 0.0
    cursor = "default"
    running = True

    while running:
        now = pygame.time.get_ticks() / 1000.0

        # -------- events --------
        for ev in pygame.event.get():
            if ev.type == pygame.QUIT:
                running = False

            elif ev.type == pygame.VIDEORESIZE:
                W, H = window_size(ev.w, ev.h)
                if (W, H) != (ev.w, ev.h):
                    screen = pygame.display.set_mode((W, H), pygame.RESIZABLE)
                pipe_rect, profile_rect, sidebar_rect, hud_rect = layout(W, H)
                explorer.resize(pipe_rect.width, pipe_rect.height)

            elif ev.type == pygame.KEYDOWN:
                if ev.key == pygame.K_ESCAPE:
                    running = False
                elif ev.key in PRESET_KEYS:
                    explorer.apply_preset(PRESET_KEYS[ev.key], now)
                elif ev.key == pygame.K_b:
                    explorer.request_boundary(now)
                elif ev.key == pygame.K_w:
                    explorer.request_wall(now)
                elif ev.key == pygame.K_e:
                    explorer.toggle_explanation(now)
                elif ev.key in CATEGORY_KEYS:
                    explorer.toggle_category(CATEGORY_KEYS[ev.key])
                elif ev.key == pygame.K_a:
                    explorer.show_all_labels()
                elif ev.key == pygame.K_h:
                    explorer.hide_all_labels()
                elif ev.key in MODEL_KEYS:
                    explorer.toggle_model(MODEL_KEYS[ev.key])
                elif ev.key == pygame.K_UP:
                    explorer.scale_reynolds(1.1)
                elif ev.key == pygame.K_DOWN:
                    explorer.scale_reynolds(1.0 / 1.1)
                elif ev.key == pygame.K_RIGHT:
                    pipe_name = explorer.step_schedule(+1)
                elif ev.key == pygame.K_LEFT:
                    pipe_name = explorer.step_schedule(-1)
                elif ev.key == pygame.K_RIGHTBRACKET:
                    explorer.adjust_roughness(+config.Pipe.ROUGHNESS_STEP)
                elif ev.key == pygame.K_LEFTBRACKET:
                    explorer.adjust_roughness(-config.Pipe.ROUGHNESS_STEP)
                elif ev.key == pygame.K_F11:
                    # 짧은 시간 안의 중복 요청 무시
                    if now >= fullscreen_pending_until:
                        fullscreen_pending_until = now + config.FULLSCREEN_PENDING
                        pygame.display.toggle_fullscreen()
                        W, H = window_size(*screen.get_size())
                        pipe_rect, profile_rect, sidebar_rect, hud_rect = layout(W, H)
                        explorer.resize(pipe_rect.width, pipe_rect.height)

            elif ev.type == pygame.MOUSEBUTTONDOWN and ev.button == 1:
                if pipe_rect.collidepoint(ev.pos):
                    explorer.pointer_down(ev.pos[0] - pipe_rect.x, ev.pos[1] - pipe_rect.y)

            elif ev.type == pygame.MOUSEBUTTONUP and ev.button == 1:
                explorer.pointer_up()

            elif ev.type == pygame.MOUSEMOTION:
                mx, my = ev.pos[0] - pipe_rect.x, ev.pos[1] - pipe_rect.y
                explorer.pointer_move(mx, my)
                hint = explorer.cursor_for(mx, my) if pipe_rect.collidepoint(ev.pos) else "default"
                if hint != cursor:
                    cursor = hint
                    pygame.mouse.set_system_cursor(CURSORS[cursor])

        # -------- simulate + render --------
        screen.fill(config.Color.BACKGROUND)
        explorer.frame(screen.subsurface(pipe_rect), now)

        strip = screen.subsurface(profile_rect)
        strip.fill(config.Color.PANEL)
        draw_velocity_profile(strip, explorer.velocity.current)

        diagram_rect = pygame.Rect(sidebar_rect.x, sidebar_rect.y, sidebar_rect.width, int(sidebar_rect.height * 0.55))
        dash_rect = pygame.Rect(sidebar_rect.x, diagram_rect.bottom, sidebar_rect.width, sidebar_rect.height - diagram_rect.height)
        diagram.draw(screen, diagram_rect, explorer.flow, explorer.results)
        draw_dashboard(screen, font, font_bold, dash_rect, explorer, pipe_name)

        # -------- HUD --------
        y = hud_rect.y + 8
        cats = "  ".join(f"{name}={'on' if explorer.annotations.categories[key] else 'off'}"
                         for key, name in config.LABEL_CATEGORIES.items())
        y = draw_text(screen, font, 10, y, f"View: {explorer.view}   Explain[E]={explorer.state.show_explanation}")
        y = draw_text(screen, font, 10, y, "Presets[1/2/3]  Boundary[B]  Wall[W]  Re[Up/Down]  Pipe[Left/Right]  ε[ [ / ] ]")
        y = draw_text(screen, font, 10, y, "Models: Colebrook[C]  IGT[I]  AGA[G]   Fullscreen[F11]  Quit[Esc]")
        y = draw_text(screen, font, 10, y, f"Labels[F1-F4]: {cats}")
        y = draw_text(screen, font, 10, y, "Show all[A]  Hide all[H]   Mouse: drag box / corner=resize / x=hide / +=show")

        pygame.display.flip()
        clock.tick(config.Screen.FPS)

    pygame.quit()


if __name__ == "__main__":
    main()
