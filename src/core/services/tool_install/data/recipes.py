"""
L0 Data — Component recipe registry.

All selectable components, in install order. Pure data, no logic.

Keys match ``Selection`` field names and ``INSTALL_ORDER``.
"""

from __future__ import annotations

from src.core.models.component import (
    AcquireStep,
    Component,
    GitSource,
    LocalSource,
    PackageInstall,
)

_UTILS3D_REV = "9a4eb15e4021b67b12c460c7057d642626897ec8"


COMPONENT_RECIPES: dict[str, Component] = {

    # ── Foundational Python packages ───────────────────────────

    "basic": Component(
        name="basic",
        flag="--basic",
        label="Basic dependencies",
        help="Install basic dependencies",
        probe_modules=(
            "imageio", "imageio_ffmpeg", "tqdm", "easydict", "cv2", "ninja",
            "trimesh", "transformers", "gradio", "tensorboard", "pandas",
            "lpips", "zstandard", "utils3d", "kornia", "timm",
        ),
        system_packages=("libjpeg-dev",),
        steps=(
            AcquireStep(
                label="core packages",
                method=PackageInstall(packages=(
                    "imageio", "imageio-ffmpeg", "tqdm", "easydict",
                    "opencv-python-headless", "ninja", "trimesh", "transformers",
                    "gradio==6.0.1", "tensorboard", "pandas", "lpips", "zstandard",
                )),
            ),
            AcquireStep(
                label="utils3d",
                method=PackageInstall(packages=(
                    f"git+https://github.com/EasternJournalist/utils3d.git@{_UTILS3D_REV}",
                )),
            ),
            # Only step with a fallback: the SIMD build needs libjpeg headers.
            AcquireStep(
                label="pillow-simd",
                method=PackageInstall(packages=("pillow-simd",)),
                fallback=PackageInstall(packages=("pillow",)),
            ),
            AcquireStep(
                label="kornia and timm",
                method=PackageInstall(packages=("kornia", "timm")),
            ),
        ),
    ),

    # ── Attention kernel ───────────────────────────────────────

    "flash_attn": Component(
        name="flash_attn",
        flag="--flash-attn",
        label="Flash-attention",
        help="Install flash-attention (CUDA optimized)",
        probe_modules=("flash_attn",),
        version_module="flash_attn",
        steps=(
            AcquireStep(
                label="flash-attn 2.7.3",
                method=PackageInstall(
                    packages=("flash-attn==2.7.3",),
                    no_build_isolation=True,
                ),
            ),
        ),
        failure_hint="Flash-attention requires the CUDA toolkit to be installed.",
    ),

    # ── Differentiable rasterizers ─────────────────────────────

    "nvdiffrast": Component(
        name="nvdiffrast",
        flag="--nvdiffrast",
        label="nvdiffrast",
        help="Install nvdiffrast",
        probe_modules=("nvdiffrast",),
        steps=(
            AcquireStep(
                label="nvdiffrast v0.4.0",
                method=GitSource(
                    repo="https://github.com/NVlabs/nvdiffrast.git",
                    branch="v0.4.0",
                    dest="nvdiffrast",
                ),
            ),
        ),
    ),
    "nvdiffrec": Component(
        name="nvdiffrec",
        flag="--nvdiffrec",
        label="nvdiffrec",
        help="Install nvdiffrec",
        probe_modules=("nvdiffrec",),
        steps=(
            AcquireStep(
                label="nvdiffrec renderutils",
                method=GitSource(
                    repo="https://github.com/JeffreyXiang/nvdiffrec.git",
                    branch="renderutils",
                    dest="nvdiffrec",
                ),
            ),
        ),
    ),

    # ── Mesh / sparse GEMM kernels ─────────────────────────────

    "cumesh": Component(
        name="cumesh",
        flag="--cumesh",
        label="CuMesh",
        help="Install cumesh",
        probe_modules=("cumesh",),
        steps=(
            AcquireStep(
                label="CuMesh",
                method=GitSource(
                    repo="https://github.com/JeffreyXiang/CuMesh.git",
                    recursive=True,
                    dest="CuMesh",
                ),
            ),
        ),
    ),
    "flexgemm": Component(
        name="flexgemm",
        flag="--flexgemm",
        label="FlexGEMM",
        help="Install flexgemm",
        probe_modules=("flexgemm",),
        steps=(
            AcquireStep(
                label="FlexGEMM",
                method=GitSource(
                    repo="https://github.com/JeffreyXiang/FlexGEMM.git",
                    recursive=True,
                    dest="FlexGEMM",
                ),
            ),
        ),
    ),

    # ── Locally-sourced extension (never selected by --all) ────

    "o_voxel": Component(
        name="o_voxel",
        flag="--o-voxel",
        label="o-voxel",
        help="Install o-voxel (needs ./o-voxel)",
        probe_modules=("ovoxel",),
        requires_local_dir="o-voxel",
        steps=(
            AcquireStep(
                label="o-voxel",
                method=LocalSource(path="o-voxel", dest="o-voxel"),
            ),
        ),
    ),
}
