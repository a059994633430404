
import argparse
import logging
import time
import pygame, sys
from balance_config import CONFIG, ConfigError, GameConfig
from balance_game import Game
from balance_input import KeyRouter
from balance_layout import compute_dims
from balance_render import RenderAssets


def recreate_window(dims, flags=pygame.DOUBLEBUF):
    try:
        return pygame.display.set_mode((dims.total_w, dims.total_h), flags, vsync=1)
    except TypeError:
        return pygame.display.set_mode((dims.total_w, dims.total_h), flags)


def build_parser():
    parser = argparse.ArgumentParser(description="Falling-block balance game")
    parser.add_argument("--variant", choices=("balance", "zone"), default="balance",
                        help="balance: keep the percentage in band; zone: keep the stack top in band")
    parser.add_argument("--seed", type=int, default=CONFIG["SEED"])
    parser.add_argument("--grace", type=int, default=CONFIG["GRACE_PERIOD_BLOCKS"],
                        help="blocks placed before the overdraft line counts")
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser


def build_game(args):
    if args.variant == "balance":
        config = GameConfig.balance_variant()
    else:
        config = GameConfig.zone_variant(grace_period_blocks=args.grace)
    seed = args.seed if args.seed is not None else int(time.time() * 1000)
    return Game(config, seed=seed)


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        game = build_game(args)
    except ConfigError as exc:
        parser.error(str(exc))
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO,
                        format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    pygame.init()
    pygame.event.set_allowed([pygame.QUIT, pygame.KEYDOWN, pygame.KEYUP])

    dims = compute_dims(game.config)
    screen = recreate_window(dims)
    pygame.display.set_caption("Balance: keep the flow in the band")
    font = pygame.font.SysFont(None, 22)
    big_font = pygame.font.SysFont(None, 34)

    render = RenderAssets(dims, font, big_font)
    router = KeyRouter(game)
    clock = pygame.time.Clock()

    while True:
        dt = clock.tick(CONFIG["FPS"])

        for e in pygame.event.get():
            if e.type == pygame.QUIT:
                pygame.quit(); sys.exit()
            router.handle(e)

        keys = pygame.key.get_pressed()
        router.update(dt, keys[pygame.K_LEFT], keys[pygame.K_RIGHT])
        game.tick(dt)

        render.draw(screen, game.snapshot())
        pygame.display.flip()


if __name__ == '__main__':
    main()
