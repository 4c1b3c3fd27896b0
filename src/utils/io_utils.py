"""IO and small helpers: profile summary export, CSV export, filename sanitization, streamlit error handler."""
import io
import re
from typing import Sequence

import streamlit as st
from docx import Document

from src.utils.errors import describe_error
from src.utils.profiles import Profile, profiles_to_dataframe


def get_profile_summary_bytes(profile: Profile) -> bytes:
    doc = Document()
    doc.add_heading("Profile Summary", 0)
    doc.add_paragraph(f"Name: {profile.name}")
    doc.add_paragraph(profile.description)
    doc.add_paragraph(f"Address: {profile.address}")
    if profile.location is not None:
        doc.add_paragraph(f"Coordinates: {profile.location.lat:.6f}, {profile.location.lng:.6f}")
    if profile.interests:
        doc.add_paragraph(f"Interests: {', '.join(profile.interests)}")
    if profile.photo:
        doc.add_paragraph(f"Photo: {profile.photo}")
    buffer = io.BytesIO()
    doc.save(buffer)
    buffer.seek(0)
    return buffer.getvalue()


def profiles_to_csv_bytes(profiles: Sequence[Profile]) -> bytes:
    """Export profiles in the given order; interests are joined with ", "."""
    df = profiles_to_dataframe(profiles)
    df["interests"] = df["interests"].apply(lambda tags: ", ".join(tags))
    return df.to_csv(index=False).encode("utf-8")


def sanitize_filename(name: str) -> str:
    return re.sub(r"[^A-Za-z0-9_]", "", name.replace(" ", "_"))


def handle_streamlit_error(error: Exception, context: str = "operation") -> None:
    title, message = describe_error(error)
    if title == "Something went wrong":
        st.error(f"❌ **Error during {context}**: {message}")
        st.exception(error)
    else:
        st.error(f"❌ **{title}**: {message}")
