# lorgnette.init() installs the chosen stack's module here as 'eventloop'.
