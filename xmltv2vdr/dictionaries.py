"""
xmltv2vdr.dictionaries - XMLTV category and rating tables

Maps XMLTV category names onto DVB content descriptor codes (the values VDR
stores as event genres) and US parental rating labels onto VDR's minimum age.
Lookups are exact and case-sensitive; several English synonyms share a code.
"""

from types import MappingProxyType
from typing import Iterable, List, Mapping, Optional

UNRATED = 0

GENRES: Mapping[str, int] = MappingProxyType(
    {
        # Movie/Drama
        "Movie/Drama": 0x10,
        "Action": 0x10,
        "Detective/Thriller": 0x11,
        "Adventure/Western/War": 0x12,
        "Science Fiction/Fantasy/Horror": 0x13,
        "Comedy": 0x14,
        "Soap/Melodrama/Folkloric": 0x15,
        "Romance": 0x16,
        "Serious/Classical/Religious/Historical Movie/Drama": 0x17,
        "Adult Movie/Drama": 0x18,
        "Adults only": 0x18,
        "Comedy-drama": 0x14,
        "Crime drama": 0x10,
        "Drama": 0x10,
        "Film": 0x10,
        "Science fiction": 0x13,
        "Soap": 0x15,
        "Standup": 0x14,
        # News/Current affairs
        "News/Current Affairs": 0x20,
        "News/Weather Report": 0x21,
        "News Magazine": 0x22,
        "Documentary": 0x23,
        "Discussion/Inverview/Debate": 0x24,
        "Weather": 0x21,
        # Show/Game show
        "Show/Game Show": 0x30,
        "Game Show/Quiz/Contest": 0x31,
        "Variety Show": 0x32,
        "Talk Show": 0x33,
        # Sports
        "Sports": 0x40,
        "Action sports": 0x40,
        "Special Event": 0x41,
        "Sport Magazine": 0x42,
        "Football/Soccer": 0x43,
        "Tennis/Squash": 0x44,
        "Team Sports": 0x45,
        "Athletics": 0x46,
        "Motor Sport": 0x47,
        "Water Sport": 0x48,
        "Winter Sports": 0x49,
        "Equestrian": 0x4A,
        "Martial Sports": 0x4B,
        "Archery": 0x46,
        "Baseball": 0x45,
        "Basketball": 0x45,
        "Bicycle": 0x40,
        "Boxing": 0x40,
        "Billiards": 0x40,
        # Children's/Youth
        "Children's/Youth Programme": 0x50,
        "Pre-school Children's Programme": 0x51,
        "Entertainment Programme for 6 to 14": 0x52,
        "Entertainment Programme for 10 to 16": 0x53,
        "Informational/Educational/School Programme": 0x54,
        "Cartoons/Puppets": 0x55,
        "Paid Programming": 0x54,
        # Music/Ballet/Dance
        "Music/Ballet/Dance": 0x60,
        "Rock/Pop": 0x61,
        "Serious/Classical Music": 0x62,
        "Folk/Tradional Music": 0x63,
        "Jazz": 0x64,
        "Musical/Opera": 0x65,
        "Ballet": 0x66,
        # Arts/Culture
        "Arts/Culture": 0x70,
        "Performing Arts": 0x71,
        "Fine Arts": 0x72,
        "Religion": 0x73,
        "Religous": 0x73,
        "Popular Culture/Traditional Arts": 0x74,
        "Literature": 0x75,
        "Film/Cinema": 0x76,
        "Experimental Film/Video": 0x77,
        "Broadcasting/Press": 0x78,
        "New Media": 0x79,
        "Arts/Culture Magazine": 0x7A,
        "Fashion": 0x7B,
        "Arts/crafts": 0x70,
        # Social/Political/Economics
        "Social/Political/Economics": 0x80,
        "Magazine/Report/Documentary": 0x81,
        "Economics/Social Advisory": 0x82,
        "Remarkable People": 0x83,
        # Education/Science/Factual
        "Education/Science/Factual": 0x90,
        "Nature/Animals/Environment": 0x91,
        "Technology/Natural Sciences": 0x92,
        "Medicine/Physiology/Psychology": 0x93,
        "Foreign Countries/Expeditions": 0x94,
        "Social/Spiritual Sciences": 0x95,
        "Further Education": 0x96,
        "Languages": 0x97,
        # Leisure/Hobbies
        "Leisure/Hobbies": 0xA0,
        "Tourism/Travel": 0xA1,
        "Handicraft": 0xA2,
        "Motoring": 0xA3,
        "Fitness & Health": 0xA4,
        "Cooking": 0xA5,
        "Advertisement/Shopping": 0xA6,
        "Gardening": 0xA7,
        "Aerobics": 0xA4,
        # Special characteristics
        "Original Language": 0xB1,
        "Black & White": 0xB2,
        "Unpublished": 0xB3,
        "Live Broadcast": 0xB4,
        # Category names found in North American XMLTV feeds
        "Children": 0x50,
        "Animated": 0x50,
        "Crime/Mystery": 0x11,
        "Educational": 0x90,
        "Science/Nature": 0x91,
        "Adult": 0x18,
        "Music": 0x60,
        "News": 0x20,
        "Talk": 0x33,
        "Unknown": 0x00,
        "Anime": 0x50,
        "Animation": 0x50,
    }
)

RATINGS: Mapping[str, int] = MappingProxyType(
    {
        "TV-Y": 2,
        "TV-Y7": 7,
        "TV-G": 8,
        "TV-PG": 10,
        "TV-14": 14,
        "TV-MA": 18,
    }
)


def get_genre_code(category: str) -> Optional[int]:
    """Get the content code for a category name, None if unknown"""
    return GENRES.get(category)


def get_genre_codes(categories: Iterable[str]) -> List[int]:
    """Map categories to content codes in order, dropping unknown names"""
    codes = []
    for category in categories:
        code = get_genre_code(category)
        if code is not None:
            codes.append(code)
    return codes


def get_rating_code(rating: Optional[str]) -> int:
    """Get the minimum age for a rating label, UNRATED if absent or unknown"""
    if rating is None:
        return UNRATED
    return RATINGS.get(rating, UNRATED)
