"""Selectors and constants used by the check catalogue."""

import re

HERO_SELECTORS = (
    'div[id*="ge-homepage-hero"] .ge-homepage-hero-v2__text-content',
    "section.ge-homepage-hero-v2-component .ge-homepage-hero-v2__text-content",
    ".ge-category-hero__container .ge-category-hero__details",
    ".hero-content-intro.ptags",
    "section.product-heroV2-container .product-heroV2-container__title",
)

HEADER = 'header, [class*="header"]'
NAV = 'nav, [class*="nav"]'
MAIN = 'main, [class*="main"]'
FOOTER = 'footer, [class*="footer"]'

VIDEO_PLAYER = (
    'video, video[data-testid="hls-video"], iframe[src*="vidyard"], '
    '[data-testid*="video"]'
)
PLAY_TRIGGERS = (
    ".eds-rd-play",
    ".eds-rd-play-icon",
    ".ge-contentTeaser__content-section__contentTeaserHero-play-icon",
    'div[data-testid="splashScreen"]',
    ".ge-contentTeaser__content-section__contentTeaserHero__img-container",
    '[class*="play-button"]',
    '[data-testid*="play"]',
)
VIDEO_MODAL = (
    "div.ge-modal-window, div.ge-modal-window-wrapper, "
    "div.ge-contentTeaser__content-section__video-modal, "
    "div.ge-contentTeaser__content-section__vidyard-video-modal"
)
MODAL_PLAYER = 'div.vidyard-player-container, iframe[src*="play.vidyard.com"], video'

CONTACT_TEXT = re.compile(r"contact|request|demander", re.IGNORECASE)
CONTACT_EXACT = 'button[name="Open Form Overlay"], a[name="Open Form Overlay"]'
CONTACT_SCOPES = (
    "section.ge-category-hero button, section.campaign-hero__ctas-primary button, "
    "section.ge-category-hero a, section.campaign-hero__ctas-primary a",
    "button",
    "a",
    '[data-analytics-link-type="Category Hero"], '
    '[data-analytics-link-type="Campaign Hero"], '
    '[data-analytics-link-type="Contact Widget"]',
)

RENDERING_ERROR_TEXT = "A rendering error occurred"

INSIGHTS_LINKS = (
    'a[href*="/insights"]',
    'a[href*="/newsroom"]',
    ".ge-press-cards__item a[href]",
    ".related-content-app-product-cards__image_container a[href]",
    ".related-content-insights-app-product-cards__image_container a[href]",
    ".related-content__container a[href]",
    ".ge-newsroom-article-card a[href]",
    ".content-list-articles-wrapper a[href]",
    '[class*="article"] a[href]',
)

DOCCHECK_PATH = "/account/doccheck-login"

PRODUCTS_MENU = "Produkte"
ULTRASOUND_ITEM = "Ultraschall"
ULTRASOUND_ITEM_FALLBACK = ".menu-content-container-item-data"
ULTRASOUND_LINK = 'a[href="https://www.ge-ultraschall.com/"]'
LEARN_MORE_TEXT = re.compile(r"Mehr erfahren", re.IGNORECASE)
ULTRASOUND_SITES = (
    "https://gehealthcare-ultrasound.com/",
    "https://www.ge-ultraschall.com/",
)

REDIRECT_STATUSES = frozenset({301, 302})
