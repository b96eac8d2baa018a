"""
Social media sources for the listener.

Every source implements next_batch(); the fixture source stands in for a
live platform client until API access is provisioned. Scoring and
persistence downstream do not depend on which source is plugged in.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Dict, List, Optional
from src.utils.constants import PLATFORM_TWITTER

@dataclass
class SocialPost:
    """Candidate post as delivered by a source, before scoring."""
    post_id: str
    author: str
    author_handle: str
    content: str
    language: str
    posted_at: datetime
    location: Optional[str] = None
    hashtags: List[str] = field(default_factory=list)
    mentions: List[str] = field(default_factory=list)
    urls: List[str] = field(default_factory=list)
    engagement: Dict[str, int] = field(default_factory=lambda: {'likes': 0, 'retweets': 0, 'replies': 0})
    platform: str = PLATFORM_TWITTER

class SocialSource(ABC):
    """Pluggable producer of candidate posts."""

    @abstractmethod
    def next_batch(self, now: datetime) -> List[SocialPost]:
        """Return the posts available at `now`. Same post_id must mean same content."""
        pass

# (post_id, author, handle, content, language, location, hashtags, mentions, urls,
#  (likes, retweets, replies), hours before collection)
_FIXTURE_POSTS = [
    (
        "mock_1", "Saudi Ministry of Health", "@SaudiMOH",
        "⚠️ تنبيه صحي: تسجيل 15 حالة إصابة بإنفلونزا الطيور (H5N1) في المنطقة الشرقية. "
        "الوضع تحت المراقبة المستمرة. جميع الإجراءات الوقائية مفعلة.",
        "ar", "Riyadh, Saudi Arabia",
        ["صحة", "إنفلونزا_الطيور", "الصحة_العامة"], ["@KSACDC"],
        ["https://moh.gov.sa/avian-flu-alert"],
        (1247, 892, 234), 2,
    ),
    (
        "mock_2", "WHO EMRO", "@WHOEMRO",
        "WHO Eastern Mediterranean Regional Office monitoring cholera outbreak in Yemen "
        "(127 confirmed cases, 8 deaths). Enhanced surveillance advised for neighboring GCC "
        "states due to risk of cross-border transmission. Full report: [link]",
        "en", "Cairo, Egypt",
        ["cholera", "Yemen", "PublicHealth", "EMRO"], ["@WHO", "@UNYemen"],
        ["https://who.int/emro/cholera-yemen-2026"],
        (2341, 1567, 445), 5,
    ),
    (
        "mock_3", "Isaac Bogoch", "@BogochIsaac",
        "Concerning trend: MERS-CoV cases increasing in Saudi Arabia this Hajj season. "
        "Genomic sequencing reveals new variant with enhanced transmissibility. "
        "Healthcare facilities on high alert. Thread 🧵",
        "en", "Toronto, Canada",
        ["MERS", "SaudiArabia", "Hajj2026", "InfectiousDiseases"], ["@SaudiMOH", "@WHO"],
        [],
        (4532, 2891, 1023), 8,
    ),
    (
        "mock_4", "Eyad Qurabi", "@Eyaaaad",
        "🚨 Breaking: Reports of dengue fever outbreak in Jeddah. Local hospitals receiving "
        "unusually high number of cases. Ministry of Health yet to release official statement. "
        "Stay vigilant. #السعودية #صحة",
        "en", "Jeddah, Saudi Arabia",
        ["السعودية", "صحة", "DengueFever", "Jeddah"], ["@SaudiMOH"],
        [],
        (892, 445, 178), 3,
    ),
    (
        "mock_5", "Saudi News 50", "@SaudiNews50",
        "عاجل | وزارة الصحة تطلق حملة تطعيم طارئة ضد الحصبة في منطقة مكة المكرمة بعد تسجيل "
        "23 حالة خلال الأسبوع الماضي. الحملة تستهدف 50000 شخص.",
        "ar", "Mecca, Saudi Arabia",
        ["عاجل", "السعودية", "تطعيم", "الحصبة"], ["@SaudiMOH"],
        ["https://saudinews50.com/measles-campaign"],
        (1567, 934, 289), 1,
    ),
    (
        "mock_6", "CDC", "@CDCgov",
        "CDC monitoring avian influenza A(H5N1) activity globally. Recent detections in poultry "
        "farms across Middle East region. Risk to general public remains low but vigilance "
        "advised for those with occupational exposure.",
        "en", "Atlanta, USA",
        ["H5N1", "AvianFlu", "PublicHealth"], ["@WHO"],
        ["https://cdc.gov/h5n1-update"],
        (3421, 2134, 567), 12,
    ),
    (
        "mock_7", "Collin Rugg", "@CollinRugg",
        "BREAKING: New respiratory illness spreading rapidly in East Asia. Hospitals overwhelmed. "
        "WHO calling emergency meeting. This could be serious. 🚨",
        "en", "United States",
        ["Breaking", "WHO", "HealthAlert"], ["@WHO"],
        [],
        (8934, 5621, 2341), 6,
    ),
    (
        "mock_8", "ProMED", "@ProMED_mail",
        "PRO/AH/EDR> Cholera - Yemen (03): (multiple provinces) WHO, spread, RFI\n"
        "A cholera outbreak continues in Yemen with 127 confirmed cases and 8 deaths reported. "
        "Geographic spread raises regional concerns.",
        "en", "Global",
        ["ProMED", "Cholera", "Yemen", "OutbreakAlert"], ["@WHO", "@WHOEMRO"],
        ["https://promedmail.org/cholera-yemen-03"],
        (1892, 1234, 345), 4,
    ),
]

class FixtureSocialSource(SocialSource):
    """
    Deterministic stand-in for the Twitter/X listener.
    Content is fixed per post_id; only the posting time is relative to `now`.
    """

    def next_batch(self, now: datetime) -> List[SocialPost]:
        posts = []
        for (post_id, author, handle, content, language, location,
             hashtags, mentions, urls, (likes, retweets, replies), hours_ago) in _FIXTURE_POSTS:
            posts.append(SocialPost(
                post_id=post_id,
                author=author,
                author_handle=handle,
                content=content,
                language=language,
                location=location,
                hashtags=list(hashtags),
                mentions=list(mentions),
                urls=list(urls),
                engagement={'likes': likes, 'retweets': retweets, 'replies': replies},
                posted_at=now - timedelta(hours=hours_ago),
            ))
        return posts
