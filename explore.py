import os
import sys
import warnings
from dataclasses import dataclass
from pathlib import Path
from typing import Any

_VERBOSE_FLAGS = {"--verbose", "-v"}
_cli_verbose = any(arg in _VERBOSE_FLAGS for arg in sys.argv[1:])
_env_log_level = os.environ.get("TF_CPP_MIN_LOG_LEVEL")
_suppress_messages = (not _cli_verbose) and _env_log_level != "0"

if _suppress_messages and _env_log_level is None:
    os.environ["TF_CPP_MIN_LOG_LEVEL"] = "3"

if _suppress_messages:
    warnings.filterwarnings(
        "ignore",
        message=r"Protobuf gencode version .* is exactly one major version older than the runtime version .*",
        category=UserWarning,
        module="google.protobuf",
    )

VERBOSE = _cli_verbose


def log(message, *args, **kwargs):
    if VERBOSE:
        print(message, *args, **kwargs)


import tensorflow as tf
import numpy as np

if _suppress_messages:
    try:
        tf.get_logger().setLevel("ERROR")
        for handler in tf.get_logger().handlers:
            handler.setLevel("ERROR")
    except Exception:
        pass

import PIL.Image
import imageio

from fractalviz import FractalEngine, ViewportState, parse_event
from fractalviz.viewport import DEFAULT_ORIGIN_IMAG, DEFAULT_ORIGIN_REAL, DEFAULT_ZOOM


def select_device() -> str:
    """Use the first visible GPU when TensorFlow sees one, else the CPU."""

    gpus = tf.config.list_physical_devices('GPU')
    if not gpus:
        log("No GPU found, using CPU")
        return '/CPU:0'
    try:
        for gpu in gpus:
            tf.config.experimental.set_memory_growth(gpu, True)
    except RuntimeError as e:
        # Memory growth can only be configured before the GPU is initialized.
        log(e)
        return '/CPU:0'
    log("GPU found, using %s" % gpus[0].name)
    return '/GPU:0'


from argparse import ArgumentParser


@dataclass
class OutputConfig:
    modes: tuple[str, ...]
    gif_path: Path | None
    image_path: Path | None
    frame_dir: Path | None
    image_format: str
    gif_frame_duration: float


def build_parser():
    parser = ArgumentParser(description='Render the Mandelbrot set and replay pan/zoom events.')

    parser.add_argument('--event', dest='events', action='append', metavar='EVENT', default=[],
                        help='Pan/zoom intent applied after the first frame. May be repeated. '
                             'Choices: up, down, left, right (or w, a, s, d), in:X,Y, out:X,Y.')

    parser.add_argument('--zoom', type=float,
                        dest='zoom', help='starting number of pixels per unit of the complex plane',
                        metavar='ZOOM', default=DEFAULT_ZOOM)

    parser.add_argument('--origin-real', type=float,
                        dest='origin_real', help='real coordinate mapped to the top-left pixel',
                        metavar='ORIGIN_REAL', default=DEFAULT_ORIGIN_REAL)

    parser.add_argument('--origin-imag', type=float,
                        dest='origin_imag', help='imaginary origin of the top-left pixel (sign flipped)',
                        metavar='ORIGIN_IMAG', default=DEFAULT_ORIGIN_IMAG)

    parser.add_argument('--mode', dest='modes', action='append', metavar='MODE',
                        help='Output modes to generate. May be repeated. Choices: image, gif, frames.')

    parser.add_argument('--output', dest='output', type=str,
                        help='Destination for single-file outputs (gif/image) or container directory when both are requested.')

    parser.add_argument('--frame-dir', dest='frame_dir', type=str,
                        help='Directory in which to store the numbered frame sequence.')

    parser.add_argument('--format', type=str,
                        dest='format', help='file format for image-based outputs. Can be any extension supported by Pillow. Default: "png".',
                        metavar='FORMAT', default='png')

    parser.add_argument('--gif-frame-duration', type=float, dest='gif_frame_duration', default=0.25,
                        metavar='SECONDS', help='Seconds each frame is shown in the GIF.')

    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Enable verbose logging, including TensorFlow and hardware diagnostics.')

    return parser


def resolve_output_config(opt, parser: ArgumentParser) -> OutputConfig:
    valid_modes = {"gif", "image", "frames"}
    modes = list(opt.modes or []) or ["image"]

    normalized_modes: list[str] = []
    for mode in modes:
        if mode not in valid_modes:
            parser.error(f"Unknown output mode '{mode}'. Valid choices: {', '.join(sorted(valid_modes))}.")
        if mode not in normalized_modes:
            normalized_modes.append(mode)

    modes_tuple = tuple(normalized_modes)
    modes_set = set(modes_tuple)

    frame_dir_value = getattr(opt, "frame_dir", None)
    frame_dir_path: Path | None = None
    if "frames" in modes_set:
        frame_dir_path = Path(frame_dir_value or "./frames").expanduser().resolve()
    elif frame_dir_value is not None:
        parser.error("--frame-dir is only valid with the frames mode.")

    image_format = (getattr(opt, "format", "png") or "png").lower().lstrip(".")
    if not image_format:
        image_format = "png"

    duration = float(getattr(opt, "gif_frame_duration", 0.25))
    if duration <= 0:
        parser.error("--gif-frame-duration must be positive.")

    file_modes = [mode for mode in modes_tuple if mode in {"gif", "image"}]
    output_arg = getattr(opt, "output", None)
    gif_path: Path | None = None
    image_path: Path | None = None

    if not file_modes:
        if output_arg:
            parser.error("--output is only valid when gif or image modes are requested.")
    elif len(file_modes) == 1:
        mode = file_modes[0]
        if output_arg:
            output_path = Path(output_arg).expanduser()
            if str(output_arg).endswith(tuple(filter(None, {os.sep, os.altsep}))) or str(output_arg).endswith("/"):
                parser.error("--output must be a file path when a single file-based mode is selected.")
            if output_path.exists() and output_path.is_dir():
                parser.error("--output must point to a file, not a directory, when a single file mode is active.")
            if mode == "gif":
                if output_path.suffix:
                    if output_path.suffix.lower() != ".gif":
                        parser.error("GIF outputs must end with .gif.")
                else:
                    output_path = output_path.with_suffix(".gif")
                gif_path = output_path.resolve()
            else:
                suffix = output_path.suffix
                expected_suffix = f".{image_format}"
                if suffix:
                    if suffix.lower() != expected_suffix.lower():
                        parser.error(f"--output extension {suffix} does not match --format {image_format}.")
                else:
                    output_path = output_path.with_suffix(expected_suffix)
                image_path = output_path.resolve()
        elif mode == "gif":
            gif_path = Path("fractal.gif").resolve()
        else:
            image_path = Path(f"fractal.{image_format}").resolve()
    else:
        base_dir = Path(output_arg).expanduser() if output_arg else Path.cwd()
        if base_dir.exists() and not base_dir.is_dir():
            parser.error("--output must be a directory when both gif and image modes are active.")
        gif_path = (base_dir / "fractal.gif").resolve()
        image_path = (base_dir / f"fractal.{image_format}").resolve()

    return OutputConfig(
        modes=modes_tuple,
        gif_path=gif_path,
        image_path=image_path,
        frame_dir=frame_dir_path,
        image_format=image_format,
        gif_frame_duration=duration,
    )


def _pil_format_name(ext: str) -> str:
    upper = ext.upper()
    if upper == "JPG":
        return "JPEG"
    if upper == "TIF":
        return "TIFF"
    return upper


def write_single_image(image: PIL.Image.Image, output_path: Path, image_format: str) -> None:
    """Write a single image to ``output_path`` using the provided format."""

    output_path.parent.mkdir(parents=True, exist_ok=True)
    image.save(str(output_path), format=_pil_format_name(image_format))


def write_frame_sequence(
    image: PIL.Image.Image,
    frame_dir: Path,
    index: int,
    digits: int,
    image_format: str,
) -> Path:
    """Persist a frame in a numbered sequence inside ``frame_dir``."""

    frame_path = frame_dir / f"frame{index:0{digits}d}.{image_format}"
    frame_dir.mkdir(parents=True, exist_ok=True)
    image.save(str(frame_path), format=_pil_format_name(image_format))
    return frame_path


@dataclass
class OutputWriters:
    config: OutputConfig
    frame_digits: int

    def __post_init__(self) -> None:
        self._gif_writer: Any = None
        if "gif" in self.config.modes and self.config.gif_path is not None:
            self.config.gif_path.parent.mkdir(parents=True, exist_ok=True)
            self._gif_writer = imageio.get_writer(
                str(self.config.gif_path), mode='I', duration=self.config.gif_frame_duration, loop=0
            )
        self._last_frame: np.ndarray | None = None

    def write_frame(self, frame_index: int, frame_array: np.ndarray) -> None:
        if self._gif_writer is not None:
            self._gif_writer.append_data(frame_array)
        if "frames" in self.config.modes and self.config.frame_dir is not None:
            write_frame_sequence(
                PIL.Image.fromarray(frame_array),
                self.config.frame_dir,
                frame_index,
                self.frame_digits,
                self.config.image_format,
            )
        self._last_frame = frame_array

    def finalize(self) -> None:
        if "image" in self.config.modes and self.config.image_path is not None and self._last_frame is not None:
            write_single_image(PIL.Image.fromarray(self._last_frame), self.config.image_path, self.config.image_format)

    def close(self) -> None:
        if self._gif_writer is not None:
            self._gif_writer.close()
            self._gif_writer = None


def main(argv=None):
    parser = build_parser()
    opt = parser.parse_args(argv)

    output_config = resolve_output_config(opt, parser)

    global VERBOSE
    VERBOSE = bool(opt.verbose)

    if not opt.zoom > 0:
        parser.error("--zoom must be strictly positive.")

    try:
        events = [parse_event(spec) for spec in opt.events]
    except ValueError as exc:
        parser.error(str(exc))

    log("TensorFlow version: %s" % tf.__version__)
    device = select_device()

    viewport = ViewportState(zoom=opt.zoom, origin_real=opt.origin_real, origin_imag=opt.origin_imag)
    engine = FractalEngine(viewport, device=device)

    total_frames = len(events) + 1
    writers = OutputWriters(output_config, frame_digits=max(3, len(str(total_frames - 1))))

    try:
        for i in range(total_frames):
            print("frame {0} out of {1}".format(i, total_frames), end='\r')
            if i == 0:
                result = engine.on_start(reset=False)
            else:
                log("\napplying %r" % (events[i - 1],))
                result = engine.on_pan_or_zoom(events[i - 1])

            real_min, real_max, imag_min, imag_max = result.bounds
            log("\nzoom=%.6g re=[%.6g, %.6g] im=[%.6g, %.6g]" % (
                engine.viewport.zoom, real_min, real_max, imag_min, imag_max))

            # The engine keeps rewriting the same buffer; hand the writers a copy.
            writers.write_frame(i, engine.buffer.copy())
    finally:
        writers.close()

    writers.finalize()
    print()


if __name__ == '__main__':
    main()
