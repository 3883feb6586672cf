"""Streamlit page for previewing mosaics from uploaded or fetched images."""

import io
from typing import List

import streamlit as st
from PIL import Image as PILImage

from mosaic import MosaicConfig, MosaicEngine, MosaicError
from mosaic.background import blur_backdrop
from mosaic.fetch import ImageFetcher, ImageSize, parse_image_ids
from mosaic.thumbnail import finalize


def _decode_uploads(uploads) -> List[PILImage.Image]:
    images: List[PILImage.Image] = []
    for up in uploads:
        with PILImage.open(io.BytesIO(up.getvalue())) as im:
            im.load()
            images.append(im.copy())
    return images


st.set_page_config(page_title="Mosaic Preview", layout="wide")

st.sidebar.header("Source")
source = st.sidebar.radio("Images from", options=["upload", "cdn"], index=0)

st.sidebar.header("Parameters")
blur_radius = st.sidebar.slider("Blur radius", min_value=0.0, max_value=100.0, value=50.0, step=1.0)
workers = st.sidebar.slider("Workers", min_value=1, max_value=8, value=1, step=1)
show_layers = st.sidebar.checkbox("Show intermediate layers", value=False)

st.title("Mosaic Preview")

images: List[PILImage.Image] = []
if source == "upload":
    uploads = st.file_uploader(
        "Images (1-4, in placement order)",
        type=["png", "jpg", "jpeg", "webp"],
        accept_multiple_files=True,
    )
    if uploads:
        try:
            images = _decode_uploads(uploads)
        except OSError as e:
            st.error(f"Could not decode upload: {e}")
else:
    did = st.text_input("Author DID", help="e.g., did:plc:abc123")
    ids_text = st.text_input("Image ids", help="Slash separated, in placement order (id1/id2/...).")
    size = st.selectbox("Rendition", options=[s.value for s in ImageSize], index=1)
    if st.button("Fetch") and did and ids_text:
        try:
            with ImageFetcher() as fetcher:
                st.session_state["fetched"] = fetcher.fetch_images(did, parse_image_ids(ids_text), ImageSize(size))
        except MosaicError as e:
            st.error(str(e))
    images = st.session_state.get("fetched", [])

if images:
    thumb_cols = st.columns(min(4, len(images)))
    for idx, im in enumerate(images):
        with thumb_cols[idx % len(thumb_cols)]:
            st.image(im, caption=f"#{idx + 1} {im.width}x{im.height}", width="stretch")

    engine = MosaicEngine(MosaicConfig(blur_radius=blur_radius, workers=workers))
    try:
        foreground, backdrop = engine.render_layers(images)
        blurred = blur_backdrop(backdrop, engine.config.blur_radius)
        thumbnail = finalize(blurred, foreground, engine.config.image_format)
    except MosaicError as e:
        st.error(str(e))
    else:
        if show_layers:
            layer_cols = st.columns(3)
            layer_cols[0].image(foreground, caption="Foreground (pad)", width="stretch")
            layer_cols[1].image(backdrop, caption="Backdrop (stretch)", width="stretch")
            layer_cols[2].image(blurred, caption="Blurred backdrop", width="stretch")

        st.subheader(f"Mosaic {thumbnail.width}x{thumbnail.height}")
        st.image(thumbnail.to_bytes(), width="stretch")
        st.download_button(
            "Download PNG",
            data=thumbnail.to_bytes(),
            file_name="mosaic.png",
            mime=thumbnail.content_type,
        )
else:
    st.info("Add 1 to 4 images to build a mosaic.")
