"""
Site search: campaigns, static pages and keyword shortcuts.

Everything here works on data already in hand; the view fetches the
campaign list and hands it over.
"""
from dataclasses import dataclass, field
from typing import Optional

ACTION = "action"
NAVIGATION = "navigation"


@dataclass(frozen=True)
class Page:
    id: str
    title: str
    content: str
    path: str
    url_name: str
    admin_only: bool = False


@dataclass(frozen=True)
class Shortcut:
    id: str
    title: str
    content: str
    type: str
    triggers: tuple
    url_name: Optional[str] = None
    admin_only: bool = False


@dataclass
class SearchResults:
    query: str = ""
    campaigns: list = field(default_factory=list)
    pages: list = field(default_factory=list)
    keywords: list = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not (self.campaigns or self.pages or self.keywords)


NAVBAR_PAGES = (
    Page("home", "Home", "Welcome to AmalSAS.id donation platform", "/", "core:home"),
    Page("vision-mission", "Vision & Mission", "Our vision is to create a better world...", "/vision-mission", "core:vision_mission"),
    Page("about-us", "About Us", "AmalSAS.id is a non-profit organization...", "/about-us", "core:about_us"),
    Page("history", "History", "Donation history and records", "/history", "donations:history"),
    Page("profile", "Profile", "User profile and account settings", "/profile", "accounts:profile"),
    Page("dashboard", "Dashboard", "Admin dashboard for managing campaigns", "/admin/dashboard", "campaigns:dashboard", admin_only=True),
    Page("add-campaign", "Add Campaign", "Create new donation campaign", "/admin/campaigns/add", "campaigns:add", admin_only=True),
)

SHORTCUTS = (
    Shortcut("signin", "Sign In / Masuk", "Login to your account", ACTION, ("masuk", "login", "signin")),
    Shortcut("signup", "Sign Up / Daftar", "Create new account", ACTION, ("daftar", "register", "signup")),
    Shortcut("logout", "Logout", "Sign out from your account", ACTION, ("logout", "keluar")),
    Shortcut("home", "Home / Beranda", "Kembali ke halaman utama", NAVIGATION,
             ("home", "beranda", "utama"), "core:home"),
    Shortcut("profile", "Profile / Profil", "Kelola informasi akun Anda", NAVIGATION,
             ("profil", "profile", "akun"), "accounts:profile"),
    Shortcut("history", "History / Riwayat", "Lihat riwayat donasi Anda", NAVIGATION,
             ("history", "riwayat", "donasi"), "donations:history"),
    Shortcut("vision-mission", "Visi & Misi", "Pelajari visi dan misi organisasi kami", NAVIGATION,
             ("visi", "misi", "vision", "mission"), "core:vision_mission"),
    Shortcut("about-us", "Tentang Kami / About Us", "Ketahui lebih lanjut tentang AmalSAS.id", NAVIGATION,
             ("tentang", "about", "kami"), "core:about_us"),
    Shortcut("contact-us", "Kontak / Contact Us", "Hubungi kami untuk informasi lebih lanjut", NAVIGATION,
             ("kontak", "contact", "hubungi"), "core:contact_us"),
    Shortcut("dashboard", "Admin Dashboard", "Panel administrasi untuk mengelola kampanye", NAVIGATION,
             ("admin", "dashboard", "panel"), "campaigns:dashboard", admin_only=True),
    Shortcut("add-campaign", "Tambah Kampanye / Add Campaign", "Buat kampanye donasi baru", NAVIGATION,
             ("tambah", "add", "buat", "kampanye"), "campaigns:add", admin_only=True),
)


def _normalize(query: Optional[str]) -> str:
    return (query or "").strip().lower()


def search_campaigns(campaigns, query: str) -> list:
    q = _normalize(query)
    if not q:
        return []
    return [
        campaign for campaign in campaigns
        if q in (campaign.title or "").lower() or q in (campaign.description or "").lower()
    ]


def search_pages(query: str, is_admin: bool = False) -> list:
    q = _normalize(query)
    if not q:
        return []
    return [
        page for page in NAVBAR_PAGES
        if (is_admin or not page.admin_only)
        and (q in page.title.lower() or q in page.content.lower() or q in page.path.lower())
    ]


def match_keywords(query: str, is_admin: bool = False) -> list:
    q = _normalize(query)
    if not q:
        return []
    return [
        shortcut for shortcut in SHORTCUTS
        if (is_admin or not shortcut.admin_only)
        and any(trigger in q for trigger in shortcut.triggers)
    ]


def run_search(query: str, campaigns, is_admin: bool = False) -> SearchResults:
    return SearchResults(
        query=(query or "").strip(),
        campaigns=search_campaigns(campaigns, query),
        pages=search_pages(query, is_admin),
        keywords=match_keywords(query, is_admin),
    )
