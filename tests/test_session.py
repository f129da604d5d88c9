"""
END-TO-END SESSION TESTS

Drive a Session through a FrameScheduler the way a front end would:
- starting, pausing, restarting and ending games
- firing, killing and buying
- spawn and round timers
- the single frame loop

NO UI DEPENDENCIES - pure gameplay logic testing.
"""
import random

import pytest

from game.survival.entities import Enemy
from game.survival.scheduler import FrameScheduler
from game.survival.session import GamePhase, Session


class RecordingRenderer:
    def __init__(self):
        self.frames = []

    def render(self, player, projectiles, enemies, round_state):
        self.frames.append((player.health, len(projectiles), len(enemies), round_state.number))


def enemy_touching_player(session, offset=30.0):
    """An enemy that reaches the player on the next tick"""
    p = session.player
    return Enemy(x=p.x + offset, y=p.y, speed=1.5)


class TestLifecycle:

    def test_new_session_is_idle(self, session):
        assert session.phase is GamePhase.IDLE
        assert session.player is None

    def test_start_easy(self, session, scheduler):
        assert session.start("easy")
        assert session.phase is GamePhase.RUNNING
        assert session.player.ammo == 10
        assert session.round.number == 1
        assert session.round.enemy_speed == 1.5
        assert session.round.spawn_count == 1
        assert session.timer_active("spawn")
        assert session.timer_active("round")
        assert scheduler.pending_frames == 1

    def test_unknown_difficulty_is_ignored(self, session, scheduler):
        assert not session.start("nightmare")
        assert session.phase is GamePhase.IDLE
        assert scheduler.pending_frames == 0

    def test_actions_rejected_while_idle(self, session):
        assert not session.fire(10, 10)
        assert not session.buy_ammo()
        assert not session.restart()
        assert not session.set_ammo(5)
        assert not session.pause()

    def test_only_one_frame_loop(self, session, scheduler):
        session.start("easy")
        session.start("hard")
        session.restart()
        assert scheduler.pending_frames == 1
        scheduler.run_frame()
        assert scheduler.pending_frames == 1

    def test_restart_reinitialises_everything(self, running, scheduler):
        running.add_currency(500)
        running.buy_health_perk()
        running.fire(500, 300)
        running.enemies.append(enemy_touching_player(running, 200))
        running.advance_round()

        assert running.restart()
        assert running.player.currency == 0
        assert running.player.max_health == 100
        assert running.player.perks == set()
        assert running.player.ammo == 10
        assert running.projectiles == []
        assert running.enemies == []
        assert running.round.number == 1
        assert running.stats["shots"] == 0

    def test_restart_keeps_difficulty(self, session):
        session.start("veteran")
        session.restart()
        assert session.profile.name == "veteran"
        assert session.player.ammo == 5

    def test_restart_does_not_leak_timers(self, running, scheduler):
        for _ in range(5):
            running.restart()
        assert scheduler.active_timers == 2

    def test_change_difficulty_goes_idle(self, running, scheduler):
        assert running.change_difficulty()
        assert running.phase is GamePhase.IDLE
        assert not running.timer_active("spawn")
        assert not running.timer_active("round")
        scheduler.run_frame()
        assert scheduler.pending_frames == 0

        running.start("hard")
        assert running.round.spawn_count == 2
        assert scheduler.pending_frames == 1


class TestFiring:

    def test_fire_consumes_ammo(self, running):
        assert running.fire(500, 300)
        assert running.player.ammo == 9
        assert len(running.projectiles) == 1
        p = running.projectiles[0]
        assert p.vx == pytest.approx(7)
        assert p.vy == pytest.approx(0)

    def test_fire_without_ammo(self, running):
        running.set_ammo(0)
        assert not running.fire(500, 300)
        assert running.projectiles == []
        assert running.player.ammo == 0

    def test_ammo_never_increases_from_firing(self, running):
        counts = [running.player.ammo]
        for _ in range(15):
            running.fire(100, 100)
            counts.append(running.player.ammo)
        assert all(b <= a for a, b in zip(counts, counts[1:]))
        assert running.player.ammo == 0
        assert len(running.projectiles) == 10

    def test_projectiles_leave_the_arena(self, running):
        running.fire(800, 300)
        for _ in range(60):
            running.tick()
        assert running.projectiles == []

    def test_rapid_fire(self, running, scheduler):
        assert running.start_rapid_fire(500, 300)
        assert running.player.ammo == 9
        scheduler.advance(360)
        assert running.player.ammo == 6

        running.stop_rapid_fire()
        scheduler.advance(1000)
        assert running.player.ammo == 6

    def test_rapid_fire_follows_aim(self, running, scheduler):
        running.start_rapid_fire(500, 300)
        running.aim(400, 100)
        scheduler.advance(120)
        last = running.projectiles[-1]
        assert last.vx == pytest.approx(0, abs=1e-9)
        assert last.vy < 0

    def test_fire_rejected_while_paused(self, running):
        running.pause()
        assert not running.fire(500, 300)
        assert running.player.ammo == 10


class TestKills:

    def test_projectile_kills_enemy(self, running):
        running.enemies.append(Enemy(x=430, y=300, speed=1.5))
        running.fire(430, 300)
        running.tick()
        assert running.enemies == []
        assert running.projectiles == []
        assert running.player.currency == 10

    def test_n_kills_pay_ten_each(self, running):
        n = 6
        for i in range(n):
            running.enemies.append(Enemy(x=500, y=150 + i * 50, speed=0.0))
        for i in range(n):
            running.fire(500, 150 + i * 50)
        for _ in range(40):
            running.tick()
        assert running.stats["kills"] == n
        assert running.player.currency == n * 10

    def test_projectile_kills_at_most_one_enemy(self, running):
        # Two overlapping enemies in the projectile's path
        running.enemies.append(Enemy(x=480, y=300, speed=0.0))
        running.enemies.append(Enemy(x=479, y=300, speed=0.0))
        running.fire(480, 300)
        for _ in range(10):
            running.tick()
        assert len(running.enemies) == 1
        assert running.enemies[0].x == 479  # first in spawn order dies
        assert running.player.currency == 10


class TestDamage:

    def test_enemy_reaching_player_deals_damage(self, running):
        running.enemies.append(enemy_touching_player(running))
        running.tick()
        assert running.player.health == 67
        assert running.enemies == []
        assert running.phase is GamePhase.RUNNING

    def test_lethal_hit_ends_the_game(self, running, scheduler):
        running.player.health = 33
        running.enemies.append(enemy_touching_player(running))

        scheduler.run_frame()

        assert running.phase is GamePhase.GAME_OVER
        assert running.player.health == 0
        assert running.enemies == []
        assert scheduler.pending_frames == 0
        assert not running.timer_active("spawn")
        assert not running.timer_active("round")

    def test_game_over_stops_the_enemy_sweep(self, running):
        running.player.health = 10
        first = enemy_touching_player(running, 30)
        second = enemy_touching_player(running, -30)
        running.enemies.extend([first, second])

        running.tick()

        assert running.phase is GamePhase.GAME_OVER
        assert running.enemies == [second]
        assert second.x == running.player.x - 30  # never moved

    def test_no_ticks_after_game_over(self, running, scheduler):
        running.player.health = 1
        running.enemies.append(enemy_touching_player(running))
        scheduler.run_frame()

        running.enemies.append(Enemy(x=100, y=100, speed=2.0))
        scheduler.advance(10_000)
        running.tick()
        assert running.enemies[0].x == 100
        assert len(running.enemies) == 1

    def test_invincibility(self, running):
        assert running.toggle_invincibility()
        running.player.health = 1
        running.enemies.append(enemy_touching_player(running))
        running.tick()
        assert running.player.health == 1
        assert running.enemies == []
        assert running.phase is GamePhase.RUNNING

    def test_health_stays_in_range(self, running):
        for _ in range(10):
            running.enemies.append(enemy_touching_player(running))
            running.tick()
            assert 0 <= running.player.health <= running.player.max_health


class TestGameOver:

    def test_game_over_is_idempotent(self, scheduler):
        scores = []
        session = Session(scheduler, rng=random.Random(0), on_game_over=scores.append)
        session.start("easy")
        session.add_currency(40)

        session._game_over()
        session._game_over()

        assert scores == [40]
        assert scheduler.active_timers == 0
        assert session.phase is GamePhase.GAME_OVER

    def test_purchases_rejected_after_game_over(self, running):
        running.add_currency(1000)
        running._game_over()
        assert not running.buy_ammo()
        assert not running.buy_medkit()
        assert running.player.currency == 1000

    def test_restart_after_game_over(self, running, scheduler):
        running._game_over()
        assert running.restart()
        assert running.phase is GamePhase.RUNNING
        assert scheduler.pending_frames == 1


class TestShop:

    def test_buy_ammo_insufficient_funds(self, running):
        running.add_currency(15)
        assert not running.buy_ammo()
        assert running.player.currency == 15
        assert running.player.ammo == 10

    def test_buy_ammo(self, running):
        running.add_currency(20)
        assert running.buy_ammo()
        assert running.player.ammo == 15
        assert running.player.currency == 0

    def test_shop_works_while_paused(self, running):
        running.pause()
        running.add_currency(300)
        running.player.health = 5
        assert running.buy_medkit()
        assert running.player.health == running.player.max_health

    def test_perk_once_per_session(self, running):
        running.add_currency(1000)
        assert running.buy_health_perk()
        assert not running.buy_health_perk()
        assert running.player.currency == 800

    def test_perk_resets_with_new_game(self, running):
        running.add_currency(200)
        running.buy_health_perk()
        running.restart()
        running.add_currency(200)
        assert running.buy_health_perk()


class TestDevOverrides:

    def test_set_ammo(self, running):
        assert running.set_ammo(999)
        assert running.player.ammo == 999

    def test_set_ammo_clamps_negative(self, running):
        running.set_ammo(-3)
        assert running.player.ammo == 0

    def test_bad_input_is_rejected(self, running):
        assert not running.set_ammo("lots")
        assert not running.add_currency(None)
        assert not running.set_ammo(float("inf"))
        assert not running.set_ammo(float("nan"))
        assert not running.add_currency(float("inf"))
        assert not running.add_currency(float("-inf"))
        assert running.player.ammo == 10
        assert running.player.currency == 0

    def test_invincibility_rejected_while_idle(self, session):
        assert not session.toggle_invincibility()
        assert not session.invincible
        session.start("easy")
        assert not session.invincible

    def test_currency_never_negative(self, running):
        running.add_currency(50)
        running.add_currency(-500)
        assert running.player.currency == 0


class TestTimers:

    def test_spawn_timer(self, running, scheduler):
        scheduler.advance(3000)
        assert len(running.enemies) == 3
        assert running.stats["spawned"] == 3

    def test_rounds_advance_on_timer(self, running, scheduler):
        scheduler.advance(85_000 * 5)
        assert running.round.number == 6
        assert running.round.spawn_count == 2 * running.round.base_spawn_count

    def test_five_round_events(self, running):
        for _ in range(5):
            running.advance_round()
        assert running.round.number == 6
        assert running.round.spawn_count == 2

    def test_round_advance_only_affects_new_enemies(self, running):
        running.spawn_wave()
        old = running.enemies[0]
        running.advance_round()
        running.spawn_wave()
        new = running.enemies[-1]
        assert old.speed == 1.5
        assert new.speed > old.speed

    def test_pause_suspends_timers(self, running, scheduler):
        scheduler.run_frame()
        running.pause()
        assert not running.timer_active("spawn")
        assert not running.timer_active("round")

        scheduler.advance(5000)
        assert running.enemies == []

        # Frame loop keeps going without moving anything
        running.enemies.append(Enemy(x=100, y=100, speed=2.0))
        scheduler.run_frame()
        assert scheduler.pending_frames == 1
        assert running.enemies[0].x == 100

    def test_resume_restarts_timers(self, running, scheduler):
        running.pause()
        assert running.resume()
        assert running.timer_active("spawn")
        scheduler.advance(1000)
        assert len(running.enemies) == 1

    def test_pause_cancels_rapid_fire(self, running, scheduler):
        running.start_rapid_fire(500, 300)
        running.toggle_pause()
        assert not running.timer_active("rapid_fire")
        running.toggle_pause()
        scheduler.advance(1000)
        assert running.player.ammo == 9


class TestFrameLoop:

    def test_renderer_called_every_frame(self, scheduler):
        renderer = RecordingRenderer()
        session = Session(scheduler, renderer=renderer, rng=random.Random(0))
        session.start("easy")
        scheduler.run_for(100)
        assert len(renderer.frames) == 10

    def test_final_frame_is_rendered(self, scheduler):
        renderer = RecordingRenderer()
        session = Session(scheduler, renderer=renderer, rng=random.Random(0))
        session.start("easy")
        session.player.health = 33
        session.enemies.append(enemy_touching_player(session))
        scheduler.run_for(100)
        assert len(renderer.frames) == 1
        assert renderer.frames[0][0] == 0

    def test_unattended_game_eventually_ends(self):
        scheduler = FrameScheduler()
        session = Session(scheduler, rng=random.Random(5))
        session.start("veteran")
        for _ in range(60 * 120):
            scheduler.run_frame()
            if session.is_over:
                break
        assert session.is_over
        assert session.player.health == 0
        assert scheduler.active_timers == 0

    def test_pop_events(self, running):
        running.fire(500, 300)
        running.fire(500, 300)
        events = running.pop_events()
        assert events["shot"] == 2
        assert running.pop_events()["shot"] == 0
