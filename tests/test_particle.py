import math

import numpy as np
import pytest

from particle import Particle, ParticleSystem, Population


def make_particle(x=100.0, y=100.0, vx=1.0, vy=0.0, born=0.0, population=Population.LIGHT):
    return Particle((x, y), (vx, vy), 3.0, 100.0, population, born)


class TestCreate:
    @pytest.mark.parametrize("population, high", [(Population.LIGHT, 255.0), (Population.DARK, 50.0)])
    def test_sampled_ranges(self, rng, population, high):
        for _ in range(200):
            p = Particle.create(10.0, 20.0, population, 0.0, rng)
            speed = math.hypot(*p.velocity)
            assert 0.5 <= speed <= 2.0
            assert 2.0 <= p.radius <= 5.0
            assert 0.0 <= p.intensity <= high
            assert p.opacity == 255.0
            assert tuple(p.position) == (10.0, 20.0)

    def test_attributes_fixed_while_advancing(self, rng):
        p = Particle.create(400.0, 300.0, Population.DARK, 0.0, rng)
        speed = math.hypot(*p.velocity)
        radius, intensity = p.radius, p.intensity
        for t in range(0, 4000, 16):
            p.advance(800, 600, t)
            assert math.hypot(*p.velocity) == pytest.approx(speed)
            assert p.radius == radius
            assert p.intensity == intensity


class TestOpacity:
    def test_linear_fade(self):
        p = make_particle(born=1000.0)
        assert p.opacity_at(1000.0) == 255.0
        assert p.opacity_at(3500.0) == pytest.approx(127.5)
        assert p.opacity_at(6000.0) == 0.0
        assert p.opacity_at(9000.0) == 0.0

    def test_advance_updates_opacity(self):
        p = make_particle()
        p.advance(800, 600, 1000.0)
        assert p.opacity == pytest.approx(255.0 * 0.8)


class TestExpiry:
    def test_boundary(self):
        p = make_particle(born=0.0)
        assert not p.is_expired(4999.0)
        assert not p.is_expired(5000.0)
        assert p.is_expired(5000.5)


class TestWallReflection:
    def test_reflects_after_crossing_without_clamping(self):
        p = make_particle(x=799.5, vx=1.0)
        p.advance(800, 600, 0.0)
        assert p.position[0] == pytest.approx(800.5)
        assert p.velocity[0] == -1.0
        p.advance(800, 600, 0.0)
        assert p.position[0] == pytest.approx(799.5)
        assert p.velocity[0] == -1.0

    def test_no_reflection_on_boundary(self):
        p = make_particle(x=799.0, vx=1.0)
        p.advance(800, 600, 0.0)
        assert p.position[0] == 800.0
        assert p.velocity[0] == 1.0

    def test_vertical_axis(self):
        p = make_particle(y=0.5, vx=0.0, vy=-1.0)
        p.advance(800, 600, 0.0)
        assert p.position[1] == pytest.approx(-0.5)
        assert p.velocity[1] == 1.0


class TestDraw:
    def test_filled_circle_without_stroke(self, canvas):
        p = make_particle(x=10.0, y=20.0)
        p.opacity = 128.0
        p.draw(canvas)
        (call,) = canvas.of("ellipse")
        assert call[1] == (10.0, 20.0, 6.0)
        assert call[2] == (100.0, 128.0)
        assert call[3] is None


class TestParticleSystem:
    def test_spawn_goes_to_population(self, rng):
        system = ParticleSystem({}, rng)
        system.spawn(1, 1, Population.LIGHT, 0.0)
        system.spawn(2, 2, Population.DARK, 0.0)
        system.spawn(3, 3, Population.DARK, 0.0)
        assert system.counts() == {"light": 1, "dark": 2}

    def test_update_visits_each_particle_once_and_culls(self, rng, canvas):
        system = ParticleSystem({}, rng)
        births = [0.0, 4000.0, 0.0, 4500.0, 0.0]
        for born in births:
            system.light.append(make_particle(born=born))
        survivors = [p for p in system.light if p.birth_time > 0]

        culled = system.update(5001.0, 800, 600, canvas)
        assert culled == 3
        # Expired particles are still drawn on the frame they are removed.
        assert len(canvas.of("ellipse")) == len(births)
        assert system.light == survivors

    def test_cull_keeps_insertion_order(self, rng, canvas):
        system = ParticleSystem({}, rng)
        particles = [make_particle(born=b) for b in (100.0, 0.0, 200.0, 0.0, 300.0)]
        system.dark.extend(particles)
        system.update(5050.0, 800, 600, canvas)
        assert [p.birth_time for p in system.dark] == [100.0, 200.0, 300.0]

    def test_lifespan_from_params(self, rng):
        system = ParticleSystem({'lifespan_ms': 1000}, rng)
        p = system.spawn(0, 0, Population.LIGHT, 0.0)
        assert p.is_expired(1001.0)
        assert np.isclose(p.opacity_at(500.0), 127.5)
