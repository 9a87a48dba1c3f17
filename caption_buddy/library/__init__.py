"""Recording library package.

WHY: Recordings and their captions outlive a playback session. This
package owns how they are stored and how demo content gets in.

HOW: store.py holds the Recording record and the RecordingStore;
demo.py seeds a store from a folder of sample media + captions.
"""

from caption_buddy.library.store import Recording, RecordingStore, RecordingStoreError

__all__ = ["Recording", "RecordingStore", "RecordingStoreError"]
