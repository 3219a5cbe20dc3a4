"""
Iris Depth Utility Functions
Landmark formatting for verbose graph logging
"""


def format_landmarks(landmarks) -> str:
    """
    Render a landmark list one landmark per line

    Args:
        landmarks: NormalizedLandmarkList proto, or any iterable of objects
                   with x, y, z attributes

    Returns:
        Multi-line debug string
    """
    items = getattr(landmarks, 'landmark', landmarks)
    lines = []
    for index, landmark in enumerate(items):
        lines.append(f"\t\tLandmark[{index}]: ({landmark.x}, {landmark.y}, {landmark.z})")
    return "\n".join(lines) + ("\n" if lines else "")


def landmark_count(landmarks) -> int:
    items = getattr(landmarks, 'landmark', landmarks)
    return len(items)
