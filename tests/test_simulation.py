import math

import pytest

from particle import Population
from simulation import Simulation, FrameInput

# Pushes the idle emitters' gate out of reach so only explicit spawns count.
QUIET = {'idle_spawn_min_ms': 1e12, 'idle_spawn_max_ms': 1e12}


@pytest.fixture
def quiet_sim(rng):
    return Simulation(dict(QUIET), 800, 600, rng=rng)


class TestFrame:
    def test_draw_order(self, rng, canvas):
        sim = Simulation({'seed': 7}, 800, 600)
        sim.particles.spawn(400, 300, Population.LIGHT, 0.0)
        sim.particles.spawn(405, 300, Population.LIGHT, 0.0)
        sim.step(0.0, FrameInput(), canvas)

        kinds = [c[0] for c in canvas.calls]
        assert kinds[0] == "background"
        assert canvas.calls[0][1] == (30,)
        # Two glow stacks of ten rings, then the particles, then the curves.
        assert kinds[1:21] == ["ellipse"] * 20
        assert kinds[21:23] == ["ellipse"] * 2
        assert kinds[23:] == ["bezier"]
        assert canvas.mode == "rgb"

    def test_idle_emitters_run_each_frame(self, canvas):
        sim = Simulation({'seed': 3}, 800, 600)
        for t in range(0, 3000, 16):
            sim.step(float(t), FrameInput(), canvas)
        counts = sim.particles.counts()
        assert 9 <= counts['light'] <= 30
        assert 9 <= counts['dark'] <= 30

    def test_spheres_stay_in_bounds(self, canvas):
        sim = Simulation({'seed': 11}, 400, 300)
        for t in range(0, 2000, 16):
            sim.step(float(t), FrameInput(), canvas)
            for sphere in (sim.light_sphere, sim.dark_sphere):
                assert 50 <= sphere.position[0] <= 350
                assert 50 <= sphere.position[1] <= 250


class TestResize:
    def test_recentres_spheres(self, quiet_sim):
        velocity = quiet_sim.light_sphere.velocity.copy()
        quiet_sim.resize(1000, 700)
        assert (quiet_sim.width, quiet_sim.height) == (1000.0, 700.0)
        assert tuple(quiet_sim.light_sphere.position) == (500.0, 350.0)
        assert tuple(quiet_sim.dark_sphere.position) == (600.0, 450.0)
        assert tuple(quiet_sim.light_sphere.velocity) == tuple(velocity)

    def test_particles_bounce_in_new_bounds(self, quiet_sim, canvas):
        quiet_sim.resize(200, 200)
        p = quiet_sim.particles.spawn(199.0, 100.0, Population.LIGHT, 0.0)
        p.velocity[:] = (2.0, 0.0)
        quiet_sim.step(0.0, FrameInput(), canvas)
        assert p.velocity[0] == -2.0


class TestScenarios:
    def test_pair_connects_then_expires(self, quiet_sim, canvas):
        quiet_sim.particles.spawn(100.0, 100.0, Population.LIGHT, 0.0)
        quiet_sim.particles.spawn(110.0, 100.0, Population.LIGHT, 0.0)

        counts = quiet_sim.step(0.0, FrameInput(), canvas)
        assert counts == {'light': 1, 'dark': 0, 'cross': 0}

        later = type(canvas)()
        counts = quiet_sim.step(5001.0, FrameInput(), later)
        assert quiet_sim.particles.light == []
        assert counts == {'light': 0, 'dark': 0, 'cross': 0}
        assert later.of("bezier") == []

    def test_single_press_spawns_three(self, quiet_sim, canvas):
        quiet_sim.step(0.0, FrameInput(pointer=(100, 100), pressed=True), canvas)
        light = quiet_sim.particles.light
        assert len(light) == 3
        for p in light:
            # Spawned within +-10 per axis, then advanced by one step of at most 2.
            assert math.hypot(p.position[0] - 100, p.position[1] - 100) <= math.hypot(10, 10) + 2

    def test_press_burst_uses_press_position(self, quiet_sim, canvas):
        frame_input = FrameInput(pointer=(400, 400), pressed=True, press_position=(100, 100))
        quiet_sim.step(0.0, frame_input, canvas)
        assert len(quiet_sim.particles.light) == 3
        for p in quiet_sim.particles.light:
            assert math.hypot(p.position[0] - 100, p.position[1] - 100) <= math.hypot(10, 10) + 2

    def test_cull_count_accumulates(self, quiet_sim, canvas):
        quiet_sim.step(0.0, FrameInput(pointer=(300, 300), pressed=True), canvas)
        assert quiet_sim.culled_total == 0
        quiet_sim.step(5001.0, FrameInput(), canvas)
        assert quiet_sim.culled_total == 3

    def test_press_and_hold_for_100ms(self, quiet_sim, canvas):
        quiet_sim.step(0.0, FrameInput(pointer=(300, 300), held=True, pressed=True), canvas)
        for t in range(16, 101, 16):
            quiet_sim.step(float(t), FrameInput(pointer=(300, 300), held=True), canvas)
        assert len(quiet_sim.particles.light) == 9
        assert quiet_sim.particles.dark == []

    def test_release_stops_hold_spawn(self, quiet_sim, canvas):
        quiet_sim.step(0.0, FrameInput(pointer=(300, 300), held=True, pressed=True), canvas)
        for t in range(16, 200, 16):
            quiet_sim.step(float(t), FrameInput(pointer=(300, 300)), canvas)
        assert len(quiet_sim.particles.light) == 3


class TestValidation:
    @pytest.mark.parametrize("params", [
        {'lifespan_ms': 0},
        {'idle_spawn_min_ms': 500, 'idle_spawn_max_ms': 100},
        {'hold_spawn_interval_ms': -1},
        {'max_distance': 0},
        {'damping': 1.0},
    ])
    def test_rejects_bad_params(self, params):
        with pytest.raises(ValueError, match="Configuration error"):
            Simulation(params, 800, 600)

    def test_seed_reproduces_state(self, canvas):
        a = Simulation({'seed': 42}, 800, 600)
        b = Simulation({'seed': 42}, 800, 600)
        assert tuple(a.light_sphere.velocity) == tuple(b.light_sphere.velocity)
