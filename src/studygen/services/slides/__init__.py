from studygen.services.slides.renderer import ChromiumSlideRenderer, SlideRenderer, build_slides_html

__all__ = ["ChromiumSlideRenderer", "SlideRenderer", "build_slides_html"]
