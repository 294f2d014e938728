"""
Frequency Player
================
Plays the selected playable octaves of the current Root as sine tones and
renders them offline for WAV export.

Why is this file needed?
------------------------
1. Selection: It keeps the list of tones the user picked from the harmonic
   table, sorted by frequency, each with its own gain and pan.
2. Playback: It feeds a sounddevice output stream from its audio callback,
   with one second ramps on every gain/pan change so nothing clicks.
3. Export: It renders the same mix offline and writes it as a WAV file.

Classes:
    LinearRamp: Sample-accurate linear parameter ramp.
    PlayerTone: One selected (harmonic, octave) tone.
    FrequencyPlayer: The tone list, the output stream, and the export.
"""
from __future__ import annotations

from typing import Any, Callable, List, Optional, Tuple, TYPE_CHECKING
import logging
import threading

import numpy as np
from scipy.io import wavfile

from harmonicexplorer.config import BLOCK_SIZE, RAMP_SECONDS, SAMPLE_RATE, START_DELAY_SECONDS
from harmonicexplorer.model.exceptions import PlayerBusyError, ValidationError
from harmonicexplorer.model.harmonics import Harmonic, PlayableOctave, Root
from harmonicexplorer.utils import initial_gain

if TYPE_CHECKING:
    import numpy.typing as npt

logger = logging.getLogger(__name__)

CHANNELS = 2
TWO_PI = 2.0 * np.pi


class LinearRamp:
    """
    A parameter that moves linearly from its current value to a target over a
    number of samples, optionally after a delay.
    """

    def __init__(self, value: float, sample_rate: int = SAMPLE_RATE) -> None:
        self.sample_rate = sample_rate
        self._value = float(value)
        self._origin = float(value)
        self._target = float(value)
        self._delay = 0
        self._length = 0
        self._position = 0

    @property
    def value(self) -> float:
        return self._value

    @property
    def target(self) -> float:
        return self._target

    @property
    def done(self) -> bool:
        return self._position >= self._delay + self._length

    def ramp_to(self, target: float, seconds: float = RAMP_SECONDS, delay: float = 0.0) -> None:
        self._origin = self._value
        self._target = float(target)
        self._delay = int(round(delay * self.sample_rate))
        self._length = max(0, int(round(seconds * self.sample_rate)))
        self._position = 0

    def advance(self, frames: int) -> npt.NDArray[np.float64]:
        """Values for the next `frames` samples."""
        index = np.arange(self._position, self._position + frames, dtype=np.float64) - self._delay
        if self._length > 0:
            progress = np.clip(index / self._length, 0.0, 1.0)
        else:
            progress = (index >= 0).astype(np.float64)
        values = self._origin + (self._target - self._origin) * progress
        self._position += frames
        if frames:
            self._value = float(values[-1])
        return values


class PlayerTone:
    """
    A tone for one playable octave of a harmonic. The synthesis state (phase
    and ramps) only exists between init() and dispose().
    """

    def __init__(self, harmonic: Harmonic, playable_octave: PlayableOctave) -> None:
        self._harmonic = harmonic
        self._playable_octave = playable_octave
        self._gain_value = initial_gain(playable_octave.octave_hertz_value)
        self._pan_value = 0.0

        self._sample_rate: int = SAMPLE_RATE
        self._oscillator_hertz: Optional[float] = None
        self._phase: float = 0.0
        self._gain: Optional[LinearRamp] = None
        self._panner: Optional[LinearRamp] = None
        self._running = False
        # ramps are retargeted by the GUI thread and advanced by the audio thread
        self._ramp_lock = threading.Lock()

    @property
    def harmonic(self) -> Harmonic:
        return self._harmonic

    @property
    def playable_octave(self) -> PlayableOctave:
        return self._playable_octave

    @property
    def frequency(self) -> float:
        return self._playable_octave.octave_hertz_value

    @property
    def gain(self) -> float:
        return self._gain_value

    @gain.setter
    def gain(self, gain: float) -> None:
        if not 0.0 <= gain <= 1.0:
            raise ValidationError(f"Gain must be within 0.0 and 1.0, got {gain}.")
        with self._ramp_lock:
            self._gain_value = float(gain)
            if self._gain is not None:
                self._gain.ramp_to(self._gain_value)

    @property
    def pan(self) -> float:
        return self._pan_value

    @pan.setter
    def pan(self, pan: float) -> None:
        if not -1.0 <= pan <= 1.0:
            raise ValidationError(f"Pan must be within -1.0 and 1.0, got {pan}.")
        with self._ramp_lock:
            self._pan_value = float(pan)
            if self._panner is not None:
                self._panner.ramp_to(self._pan_value)

    @property
    def initialized(self) -> bool:
        return self._gain is not None

    def matches(self, harmonic_number: int, octave_number: int) -> bool:
        return (self._harmonic.harmonic_number == harmonic_number
                and self._playable_octave.octave_number == octave_number)

    def snapshot(self) -> PlayerTone:
        """A fresh, uninitialised tone with the same cell, gain and pan."""
        tone = PlayerTone(self._harmonic, self._playable_octave)
        tone._gain_value = self._gain_value
        tone._pan_value = self._pan_value
        return tone

    def init(self, sample_rate: int = SAMPLE_RATE) -> None:
        with self._ramp_lock:
            if self._gain is None:
                self._sample_rate = sample_rate
                self._gain = LinearRamp(self._gain_value, sample_rate)
                self._panner = LinearRamp(self._pan_value, sample_rate)
                self._phase = 0.0

    def start(self) -> None:
        if self._gain is None:
            raise RuntimeError("Tone not properly initialized")
        # frequency is fixed at the moment the tone starts
        self._oscillator_hertz = self.frequency
        self._running = True

    def stop(self) -> None:
        if self._gain is None:
            raise RuntimeError("Tone not properly initialized")
        self._running = False

    def dispose(self) -> None:
        with self._ramp_lock:
            self._running = False
            self._gain = None
            self._panner = None
            self._oscillator_hertz = None

    def render(self, frames: int) -> npt.NDArray[np.float64]:
        """Next block of this tone as (frames, 2) stereo samples."""
        with self._ramp_lock:
            if not self._running or self._gain is None:
                return np.zeros((frames, CHANNELS))

            step = TWO_PI * self._oscillator_hertz / self._sample_rate
            phases = self._phase + step * np.arange(frames)
            self._phase = float((self._phase + step * frames) % TWO_PI)
            wave = np.sin(phases) * self._gain.advance(frames)

            # equal-power panning
            angle = (self._panner.advance(frames) + 1.0) * np.pi / 4.0
        return np.column_stack((wave * np.cos(angle), wave * np.sin(angle)))


def mix_tones(tones: List[PlayerTone], master: LinearRamp, frames: int) -> npt.NDArray[np.float64]:
    """Sum of the tones' next block scaled by the master gain, clipped to [-1, 1]."""
    mix = np.zeros((frames, CHANNELS))
    for tone in tones:
        mix += tone.render(frames)
    mix *= master.advance(frames)[:, np.newaxis]
    return np.clip(mix, -1.0, 1.0)


class FrequencyPlayer:
    """
    The player to which playable octaves of harmonics are added. Tones are
    kept sorted by frequency.

    `_lock` guards the tone lists, the master gain and the stream handle. It is
    never held while the stream is stopped, since stopping waits for the audio
    callback, which takes the same lock.
    """

    def __init__(
        self,
        root: Root,
        sample_rate: int = SAMPLE_RATE,
        stream_factory: Optional[Callable[..., Any]] = None
    ) -> None:
        self._root = root
        self._tones: List[PlayerTone] = []
        # tones of a replaced root, still sounding until the fade out ends
        self._fading: List[PlayerTone] = []
        self._gain_value = 1.0
        self._playing = False
        self._exporting = False
        self.sample_rate = sample_rate

        self._stream_factory = stream_factory
        self._stream_errors: Tuple[type, ...] = (OSError,)
        self._stream: Optional[Any] = None
        self._destination_gain: Optional[LinearRamp] = None
        self._stop_timer: Optional[threading.Timer] = None
        self._lock = threading.RLock()

    @property
    def root(self) -> Root:
        return self._root

    @root.setter
    def root(self, root: Root) -> None:
        """
        Replacing the root drops the selected tones. When playing, the old
        tones fade out before the stream is released. Refused while exporting.
        """
        with self._lock:
            if self._exporting:
                raise PlayerBusyError("Can't change the root while an export is running.")
            if self._playing:
                self._fading.extend(self._tones)
                self.stop()
            self._root = root
            self._tones = []

    @property
    def tones(self) -> List[PlayerTone]:
        return list(self._tones)

    @property
    def playing(self) -> bool:
        return self._playing

    @property
    def exporting(self) -> bool:
        return self._exporting

    @property
    def overall_gain(self) -> float:
        return self._gain_value

    @overall_gain.setter
    def overall_gain(self, gain: float) -> None:
        if not 0.0 <= gain <= 1.0:
            raise ValidationError(f"Gain must be within 0.0 and 1.0, got {gain}.")
        with self._lock:
            self._gain_value = float(gain)
            if self._destination_gain is not None and self._stop_timer is None:
                self._destination_gain.ramp_to(gain)

    # --- Tone selection ---
    def add_harmonic_octave(self, harmonic_number: int, octave_number: int) -> PlayerTone:
        with self._lock:
            harmonic = self._root.find_harmonic(harmonic_number)
            octave = harmonic.find_playable_octave(octave_number) if harmonic else None
            if octave is None:
                raise ValidationError(f"No playable octave {harmonic_number}:{octave_number} in the current root.")

            tone = PlayerTone(harmonic, octave)
            tones = sorted(self._tones + [tone], key=lambda t: t.frequency)
            if self._playing:
                with self._root.lock:
                    tone.init(self.sample_rate)
                    tone.start()
            self._tones = tones
        logger.debug(f"Added tone {harmonic_number}:{octave_number} ({tone.frequency:.6f} Hz)")
        return tone

    def find_harmonic_octave(self, harmonic_number: int, octave_number: int) -> Optional[PlayerTone]:
        for tone in self._tones:
            if tone.matches(harmonic_number, octave_number):
                return tone
        return None

    def remove_harmonic_octave(self, harmonic_number: int, octave_number: int) -> bool:
        with self._lock:
            tone = self.find_harmonic_octave(harmonic_number, octave_number)
            if tone is None:
                return False
            self._tones = [t for t in self._tones if t is not tone]
            if tone.initialized:
                tone.stop()
                tone.dispose()
        logger.debug(f"Removed tone {harmonic_number}:{octave_number}")
        return True

    def has_frequency_value(self, frequency: float) -> bool:
        return any(tone.frequency == frequency for tone in self._tones)

    # --- Playback ---
    def _open_stream(self) -> Any:
        if self._stream_factory is None:
            # PortAudio is loaded when sounddevice is imported
            import sounddevice as sd
            self._stream_factory = sd.OutputStream
            self._stream_errors = (sd.PortAudioError, OSError)
        return self._stream_factory(
            samplerate=self.sample_rate,
            channels=CHANNELS,
            dtype="float32",
            blocksize=BLOCK_SIZE,
            callback=self._audio_callback,
        )

    def _start_tones(self, tones: List[PlayerTone], root: Root) -> LinearRamp:
        """Initialise the tones and return a master gain fading in from silence."""
        master = LinearRamp(0.0, self.sample_rate)
        with root.lock:
            for tone in tones:
                tone.init(self.sample_rate)
                tone.start()
        master.ramp_to(self._gain_value, RAMP_SECONDS, delay=START_DELAY_SECONDS)
        return master

    def start(self) -> None:
        with self._lock:
            if self._playing or self._exporting or not self._tones:
                return
            self._destination_gain = self._start_tones(self._tones, self._root)
            self._stream = self._open_stream()
            self._stream.start()
            self._playing = True
        logger.info(f"Playback started with {len(self._tones)} tones.")

    def stop(self) -> None:
        """Fade out over one second, then release the stream."""
        with self._lock:
            if not self._playing or self._stop_timer is not None:
                return
            self._destination_gain.ramp_to(0.0, RAMP_SECONDS)
            self._stop_timer = threading.Timer(RAMP_SECONDS, self._dispose, kwargs={"after_fade": True})
            self._stop_timer.daemon = True
            self._stop_timer.start()
        logger.info("Playback stopping.")

    def close(self) -> None:
        """Release the stream right away, without the fade out."""
        if self._playing:
            self._dispose()

    def _dispose(self, after_fade: bool = False) -> None:
        with self._lock:
            if after_fade and self._stop_timer is not threading.current_thread():
                # already released by close()
                return
            if self._stop_timer is not None:
                self._stop_timer.cancel()
                self._stop_timer = None
            # detach first; the callback outputs silence from here on
            stream, self._stream = self._stream, None
            self._destination_gain = None
            self._playing = False
            for tone in self._tones + self._fading:
                tone.dispose()
            self._fading = []

        if stream is not None:
            try:
                stream.stop()
                stream.close()
            except self._stream_errors as e:
                logger.warning(f"Could not close audio stream: {e}")
        logger.info("Playback stopped.")

    def _audio_callback(self, outdata, frames, time_info, status) -> None:
        if status:
            logger.debug(f"Audio stream status: {status}")
        with self._lock:
            if self._destination_gain is None:
                outdata.fill(0)
                return
            mix = mix_tones(self._tones + self._fading, self._destination_gain, frames)
        outdata[:] = mix.astype(np.float32)

    # --- Export ---
    def render(self, duration: float) -> npt.NDArray[np.float64]:
        """
        Render `duration` seconds of the current tones offline, as if playback
        started at time zero. Returns a (frames, 2) float array in [-1, 1].

        The tones are copied when the render starts; later changes to the
        selection, gains or pans do not reach the rendered buffer.
        """
        if duration <= 0:
            raise ValidationError(f"Duration must be positive, got {duration}.")
        frames = int(round(duration * self.sample_rate))

        with self._lock:
            if self._playing or self._exporting:
                raise PlayerBusyError(
                    "Can't export while currently playing or exporting. "
                    "Press stop first, or wait for the last export to finish."
                )
            self._exporting = True
            tones = [tone.snapshot() for tone in self._tones]
            root = self._root
        try:
            master = self._start_tones(tones, root)
            blocks = []
            for offset in range(0, frames, BLOCK_SIZE):
                blocks.append(mix_tones(tones, master, min(BLOCK_SIZE, frames - offset)))
            return np.concatenate(blocks) if blocks else np.zeros((0, CHANNELS))
        finally:
            with self._lock:
                self._exporting = False

    def export_to_wav(self, filepath: str, duration: float) -> None:
        """Write `duration` seconds of the current tones to a 16-bit WAV file."""
        logger.info(f"Exporting {duration} s of {len(self._tones)} tones to: {filepath}")
        buffer = self.render(duration)
        pcm = np.round(buffer * np.iinfo(np.int16).max).astype(np.int16)
        try:
            wavfile.write(filepath, self.sample_rate, pcm)
        except OSError as e:
            logger.error(f"Failed to write WAV file: {e}")
            raise
        logger.info(f"Exported WAV to: {filepath}")
