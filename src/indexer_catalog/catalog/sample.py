"""Sample NZB indexer listing in the tab-delimited input format."""

SAMPLE_LISTING = """nzb	Headphones VIP	en-US	A Private Usenet indexer for music	Private	Audio
nzb	abNZB	en-US	Newznab is an API search specification for Usenet	Private	MoviesAudioPCTVXXXBooksOther
nzb	altHUB	en-US	Newznab is an API search specification for Usenet	Private	MoviesAudioPCTVBooks
nzb	AnimeTosho (Usenet)	en-US	Newznab is an API search specification for Usenet	Private	MoviesTV
nzb	DOGnzb	en-US	Newznab is an API search specification for Usenet	Private	ConsoleMoviesAudioPCTVXXXBooksOther
nzb	DrunkenSlug	en-US	Newznab is an API search specification for Usenet	Private	ConsoleMoviesAudioPCTVXXXBooks
nzb	GingaDADDY	en-US	Newznab is an API search specification for Usenet	Private	None
nzb	Miatrix	en-US	Newznab is an API search specification for Usenet	Private	ConsoleMoviesAudioPCTVXXXBooksOther
nzb	Newz69	en-US	Newznab is an API search specification for Usenet	Private	ConsoleMoviesAudioPCTVXXXBooksOther
nzb	NinjaCentral	en-US	Newznab is an API search specification for Usenet	Private	ConsoleMoviesAudioPCTVXXXBooksOther
nzb	Nzb.su	en-US	Newznab is an API search specification for Usenet	Private	ConsoleMoviesAudioPCTVXXXBooksOther
nzb	NZBCat	en-US	Newznab is an API search specification for Usenet	Private	ConsoleMoviesAudioPCTVXXXBooks
nzb	NZBFinder	en-US	Newznab is an API search specification for Usenet	Private	MoviesAudioTVXXXBooks
nzb	NZBgeek	en-US	Newznab is an API search specification for Usenet	Private	ConsoleMoviesAudioPCTVXXXBooksOther
nzb	NzbNoob	en-US	Newznab is an API search specification for Usenet	Private	MoviesAudioPCTVXXXBooksOther
nzb	NZBNDX	en-US	Newznab is an API search specification for Usenet	Private	ConsoleMoviesAudioPCTVXXXBooksOther
nzb	NzbPlanet	en-US	Newznab is an API search specification for Usenet	Private	ConsoleMoviesAudioPCTVXXXBooksOther
nzb	NZBStars	en-US	Newznab is an API search specification for Usenet	Private	ConsoleMoviesAudioPCTVXXXBooks
nzb	Tabula Rasa	en-US	Newznab is an API search specification for Usenet	Private	ConsoleMoviesAudioPCTVXXXBooks
nzb	Generic Newznab	en-US	Newznab is an API search specification for Usenet	Private	None"""
