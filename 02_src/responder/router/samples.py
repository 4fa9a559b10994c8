"""Canned demo payloads for the sample message menu."""

from typing import Callable

from ..models import (
    Buttons,
    ContactCard,
    Contacts,
    InteractiveList,
    ListRow,
    ListSection,
    Location,
    Media,
    OutboundPayload,
    Reaction,
    Text,
)

# Options of the "button" demo, in button order. "Cancel" is option 7.
BUTTON_SAMPLES = ["image", "location", "image", "audio", "video", "document"]

BUTTON_MENU = Buttons(
    message="Select one message type",
    footer="You will receive a sample message",
    buttons=("Image", "Location", "Image", "Audio", "Video", "Document", "Cancel"),
)

VEHICLE_LIST = InteractiveList(
    description="Select which type of vehicle you are interested in",
    button="Tap to select",
    title="Optional message _title_",
    footer="Optional *message* footer",
    sections=(
        ListSection(
            title="Select a car type",
            rows=(
                ListRow("a1", "Coupe", "This a description for coupe cars"),
                ListRow("a2", "Sports", "This a description for sports cars"),
                ListRow("a3", "SUV", "This a description for SUV cars"),
                ListRow("a4", "Minivan", "This a description for minivan cars"),
                ListRow("a5", "Crossover", "This a description for crossover cars"),
                ListRow("a6", "Wagon", "This a description for wagon cars"),
            ),
        ),
        ListSection(
            title="Select a motorbike type",
            rows=(
                ListRow("b1", "Touring", "Designed to excel at covering long distances"),
                ListRow("b2", "Cruiser", "Harley-Davidsons largely define the cruiser category"),
                ListRow("b3", "Standard", "Motorcycle intended for use on streets and commuting"),
            ),
        ),
    ),
)

EMOJI_TEXT = (
    "Hello 👋 \nThis is a test message with emojis 👌 😘 😗 😙 😚 😋 😛 😝 😜 "
    "copied as text from:\nhttps://getemoji.com\n\n"
    "Emojis 👶 👧 🧒 👦  are simply unicode rich characters, "
    "so you can copy & paste them as simple text 😀 👏"
)

SHOWCASE_TEXT = (
    "Hello everyone, and welcome to this demo showcase of a WhatsApp chatbot! 🎉\n\n"
    "During this demo, you will get a glimpse of the chatbot's key features, which include "
    "instant customer support, interactive conversations, personalized recommendations, "
    "and seamless integration with your existing business processes. We are confident that "
    "our chatbot will not only save you time and resources but also foster stronger customer "
    "relationships and drive growth for your business.\n\nLet's get started! 😀"
)

_SAMPLES: dict[str, Callable[[str], OutboundPayload]] = {
    "list": lambda message_id: VEHICLE_LIST,
    "image": lambda message_id: Media(
        url="https://picsum.photos/600",
        message="This is a random image\nCheers 🥳 😀",
    ),
    "video": lambda message_id: Media(
        url="https://download.samplelib.com/mp4/sample-5s.mp4",
        message="This is a sample video\nCheers 🥳 😀",
    ),
    "audio": lambda message_id: Media(
        url="https://download.samplelib.com/mp3/sample-9s.mp3",
        format="ptt",
    ),
    "location": lambda message_id: Location(
        address="20 W 34th St., New York, NY 10001, United States"
    ),
    "contact": lambda message_id: Contacts(
        contacts=(
            ContactCard(name="Thomas Anderson", phone="+1234567890"),
            ContactCard(name="John Wick", phone="+1234567890"),
        )
    ),
    "document": lambda message_id: Media(
        url="https://www.w3.org/WAI/ER/tests/xhtml/testfiles/resources/pdf/dummy.pdf",
        message="This is a sample PDF 😀",
    ),
    "file": lambda message_id: Media(
        url="https://www.learningcontainer.com/wp-content/uploads/2020/05/sample-zip-file.zip",
        message="This is a sample ZIP file 😀",
    ),
    "excel": lambda message_id: Media(
        url="https://go.microsoft.com/fwlink/?LinkID=521962",
        message="This is a sample Excel file 😀",
    ),
    "format": lambda message_id: Text(
        message=(
            "This message is formatted using _italic format_, *bold format*, "
            "~strikethrough format~ and ```monospace format```"
        )
    ),
    "quote": lambda message_id: Text(
        message="This is a quoted reply to your last message", quote=message_id
    ),
    "emoji": lambda message_id: Text(message=EMOJI_TEXT),
    "react": lambda message_id: Reaction(emoji="👍", message_id=message_id),
    "link": lambda message_id: Text(
        message="Hey checkout this video: https://www.youtube.com/watch?v=dMH0bHeiRNg"
    ),
    "text": lambda message_id: Text(message=SHOWCASE_TEXT),
}


def is_sample(intent: str) -> bool:
    return intent in _SAMPLES


def build_sample(intent: str, message_id: str) -> OutboundPayload:
    """Build the demo payload for a sample intent. KeyError for unknown intents."""
    return _SAMPLES[intent](message_id)
