"""Pytest configuration for SPH tests."""
import taichi as ti


def pytest_configure(config):
    """Initialize taichi once, every test shares the CPU runtime."""
    ti.init(arch=ti.cpu, default_fp=ti.f32, random_seed=0)
